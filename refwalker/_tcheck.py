import beartype
from jaxtyping import jaxtyped

__all__ = [
    "typecheck",
    "array_typecheck",
]

# annotations are checked on every public call, violations only warn so that
# a walk over an unexpected object graph is never aborted by a hint
typecheck = beartype.beartype(
    conf=beartype.BeartypeConf(
        violation_type=UserWarning,
    )
)

typecheck.__doc__ = """
Check the arguments and return value of a call against its annotations and
emit a `UserWarning` for every mismatch.
"""

# array shapes and dtypes of one call are checked against each other as well
array_typecheck = jaxtyped(typechecker=typecheck)
