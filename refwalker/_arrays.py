"""
Classification of array-like objects.

Arrays of numbers cannot hold references and are never traversed. Numpy
arrays of dtype `object` are traversed like flat sequences.
"""

import array

import jax
import numpy as np
from jaxtyping import Shaped

from ._tcheck import array_typecheck

__all__ = [
    "is_array",
    "is_primitive_array",
    "holds_references",
    "array_elements",
]

# arrays whose elements are always plain numbers
_PRIMITIVE_ARRAYS = (jax.Array, array.array)


def is_array(obj: object, /) -> bool:
    return isinstance(obj, (np.ndarray, *_PRIMITIVE_ARRAYS))


def is_primitive_array(obj: object, /) -> bool:
    """
    Whether the type alone guarantees that the elements are plain numbers.
    """
    return isinstance(obj, _PRIMITIVE_ARRAYS)


def holds_references(obj: object, /) -> bool:
    """
    Whether the elements of an array are references to arbitrary objects.
    """
    if isinstance(obj, _PRIMITIVE_ARRAYS):
        return False

    return isinstance(obj, np.ndarray) and obj.dtype.hasobject


@array_typecheck
def array_elements(x: Shaped[np.ndarray, "..."], /) -> list:
    """
    Elements of an object array in flat (C) order.

    Parameters
    ---
    x: np.ndarray
        Array of dtype `object`. Structured dtypes with object fields are
        returned as whole records.

    Returns
    ---
    list
        The elements, the position in the list is the flat index.
    """
    return list(x.flat)
