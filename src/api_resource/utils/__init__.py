import collections.abc
import typing

from .types import UNSPECIFIED, UnspecifiedType  # noqa: F401


def is_collection(value: typing.Any) -> bool:
    """
    Tells if ``value`` is a collection of entities rather than a single entity.
    Strings and bytes are not considered.
    """
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (collections.abc.Sequence, collections.abc.Set))
