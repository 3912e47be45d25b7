import collections.abc
import typing

_missing = object()


def data_get(target: typing.Any, key: typing.Optional[str], default: typing.Any = None) -> typing.Any:
    """
    Retrieves a value from nested mappings, sequences or objects using "dot" notation.

    :param Any target: the root object.
    :param Optional[str] key: a dotted key such as ``"user.roles.0"``. :py:const:`None` returns the target itself.
    :param Any default: the value returned when any of the segments does not resolve.
    """
    if key is None:
        return target
    value = target
    for segment in key.split("."):
        if isinstance(value, collections.abc.Mapping):
            value = value.get(segment, _missing)
        elif isinstance(value, collections.abc.Sequence) and not isinstance(value, str):
            try:
                value = value[int(segment)]
            except (ValueError, IndexError):
                value = _missing
        else:
            value = getattr(value, segment, _missing)
        if value is _missing:
            return default
    return value


def merge_recursive(*mappings: typing.Mapping[str, typing.Any]) -> typing.Dict[str, typing.Any]:
    """
    Merges mappings the way PHP's ``array_merge_recursive`` does for string keys:
    nested mappings are merged, and colliding non-mapping values are gathered into a list.
    """
    result: typing.Dict[str, typing.Any] = {}
    for mapping in mappings:
        for k, v in mapping.items():
            if k not in result:
                result[k] = v
                continue
            prev = result[k]
            if isinstance(prev, collections.abc.Mapping) and isinstance(v, collections.abc.Mapping):
                result[k] = merge_recursive(prev, v)
            else:
                result[k] = _as_merge_list(prev) + _as_merge_list(v)
    return result


def _as_merge_list(value: typing.Any) -> typing.List[typing.Any]:
    if isinstance(value, list):
        return list(value)
    return [value]
