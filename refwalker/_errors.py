"""
Error taxonomy of the reference walker.

Failures while introspecting a single object are recovered from locally,
only failures of the interpreter itself are allowed to abort a search.
"""

__all__ = [
    "RefWalkerError",
    "EnumerationError",
    "FATAL_ERRORS",
    "is_fatal",
]

# the interpreter is in trouble, continuing the walk would only make it worse
FATAL_ERRORS = (
    MemoryError,
    RecursionError,
    SystemError,
)


class RefWalkerError(Exception):
    pass


class EnumerationError(RefWalkerError):
    """
    Iterating a sequence or mapping raised. The original exception is
    available as `__cause__`.
    """

    def __init__(self, cls: type, message: str) -> None:
        super().__init__(f"Cannot enumerate `{cls.__qualname__}`: {message}")
        self.cls = cls


def is_fatal(error: BaseException) -> bool:
    if not isinstance(error, Exception):
        return True

    return isinstance(error, FATAL_ERRORS)
