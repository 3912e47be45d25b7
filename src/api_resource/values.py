"""
Conditional values that may or may not end up in the serialized output.

Every entry a resource produces is one of:

* a plain value, always present;
* :py:data:`MISSING`, which makes the key vanish from the output;
* a :py:class:`MergeValue`, whose mapping is merged into the enclosing object (its own key is discarded);
* a :py:class:`Resolvable` (a nested resource), resolved in turn.

Presence is decided when the data is resolved, never by looking at :py:const:`None`.
"""
import abc
import collections.abc
import typing


class PotentiallyMissing(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def is_missing(self) -> bool:
        ...  # pragma: nocover


class MissingValue(PotentiallyMissing):
    _singleton: typing.ClassVar[typing.Optional["MissingValue"]] = None

    def is_missing(self) -> bool:
        return True

    def __bool__(self):
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __new__(cls) -> "MissingValue":
        if cls._singleton is None:
            cls._singleton = object.__new__(cls)
        return cls._singleton


MISSING = MissingValue()


class MergeValue:
    data: typing.Mapping[str, typing.Any]

    def __repr__(self) -> str:
        return f"MergeValue({self.data!r})"

    def __init__(self, data: typing.Mapping[str, typing.Any]):
        if not isinstance(data, collections.abc.Mapping):
            raise TypeError(f"only mappings can be merged: {data!r}")
        self.data = data


class Resolvable(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def resolve(self, request: typing.Any = None) -> typing.Any:
        ...  # pragma: nocover


def is_missing(value: typing.Any) -> bool:
    return isinstance(value, PotentiallyMissing) and value.is_missing()


def when(condition: typing.Any, value: typing.Any, default: typing.Any = MISSING) -> typing.Any:
    """
    Returns ``value`` (called first if it is callable) when ``condition`` holds, ``default`` otherwise.
    """
    if condition:
        return value() if callable(value) else value
    return default() if callable(default) else default


def merge_when(condition: typing.Any, value: typing.Any) -> typing.Union[MergeValue, MissingValue]:
    if not condition:
        return MISSING
    if callable(value):
        value = value()
    return MergeValue(value)


Fragments = typing.Union[
    typing.Mapping[str, typing.Any],
    typing.Sequence[typing.Union[typing.Mapping[str, typing.Any], MergeValue, MissingValue]],
]


def _iter_entries(data: Fragments) -> typing.Iterator[typing.Tuple[typing.Optional[str], typing.Any]]:
    if isinstance(data, collections.abc.Mapping):
        yield from data.items()
        return
    for fragment in data:
        if isinstance(fragment, collections.abc.Mapping):
            yield from fragment.items()
        else:
            yield None, fragment


def filter_data(data: Fragments, request: typing.Any = None) -> typing.Dict[str, typing.Any]:
    """
    Turns the output of ``to_array`` into a plain dictionary: missing entries are dropped,
    merge values are flattened into the result, and nested resources are resolved.
    """
    result: typing.Dict[str, typing.Any] = {}
    for key, value in _iter_entries(data):
        if isinstance(value, MergeValue):
            result.update(filter_data(value.data, request))
        elif is_missing(value):
            continue
        elif key is None:
            raise TypeError(f"unkeyed value in resource data: {value!r}")
        else:
            result[key] = resolve_value(value, request)
    return result


def resolve_value(value: typing.Any, request: typing.Any = None) -> typing.Any:
    if isinstance(value, Resolvable):
        return value.resolve(request)
    elif isinstance(value, collections.abc.Mapping):
        return filter_data(value, request)
    elif isinstance(value, (list, tuple)):
        return [resolve_value(v, request) for v in value if not is_missing(v)]
    return value
