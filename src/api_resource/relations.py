"""
Dotted relation paths and the set operations the builder performs on them.

A relation path such as ``"comments.author"`` names the ``author`` relation of every
entity reachable through ``comments``.  Granting a nested path implies granting each of
its prefixes, so comparisons are made between "unnested" sets:

.. code-block:: python

   >>> unnest("a.b.c")
   ['a', 'a.b', 'a.b.c']
   >>> sorted(intersect(["author.profile"], ["author"]))
   ['author']

"""
import collections.abc
import dataclasses
import typing

from .exceptions import InvalidDeclarationError, InvalidRelationPathError

if typing.TYPE_CHECKING:
    from .resource import Resource  # noqa: F401

Callback = typing.Callable[[typing.Any], typing.Any]


class RelationPath(tuple):
    """
    An immutable sequence of relation names.  Equality is structural.
    """

    @classmethod
    def parse(cls, path: typing.Union[str, "RelationPath"]) -> "RelationPath":
        if isinstance(path, RelationPath):
            return path
        if not isinstance(path, str):
            raise InvalidRelationPathError(path, "not a string")
        segments = path.split(".")
        if any(not s for s in segments):
            raise InvalidRelationPathError(path, "empty segment")
        return cls(segments)

    @property
    def head(self) -> str:
        return self[0]

    @property
    def tail(self) -> "RelationPath":
        return RelationPath(self[1:])

    def prefixes(self) -> typing.List["RelationPath"]:
        return [RelationPath(self[: i + 1]) for i in range(len(self))]

    def __new__(cls, segments: typing.Iterable[str] = ()):
        return super().__new__(cls, segments)

    def __str__(self) -> str:
        return ".".join(self)

    def __repr__(self) -> str:
        return f"RelationPath({str(self)!r})"


@dataclasses.dataclass(frozen=True)
class RelationSpec:
    """
    A relation path, optionally accompanied by the resource type used to wrap the related
    entities and by a callback invoked on them before serialization.
    """

    path: str
    resource_type: typing.Optional[typing.Type["Resource"]] = None
    callback: typing.Optional[Callback] = None

    def __post_init__(self):
        RelationPath.parse(self.path)


RelationSpecLike = typing.Union[
    str,
    RelationSpec,
    typing.Mapping[str, typing.Union[None, Callback, typing.Type["Resource"]]],
]


def split(path: typing.Union[str, RelationPath]) -> typing.List[str]:
    return list(RelationPath.parse(path))


def unnest(path: typing.Union[str, RelationPath]) -> typing.List[str]:
    """
    Returns every prefix of the dotted path, shortest first.
    """
    return [str(p) for p in RelationPath.parse(path).prefixes()]


def unnest_all(paths: typing.Iterable[typing.Union[str, RelationPath]]) -> typing.Set[str]:
    result: typing.Set[str] = set()
    for path in paths:
        result.update(unnest(path))
    return result


def intersect(
    requested: typing.Iterable[typing.Union[str, RelationPath]],
    allowed: typing.Iterable[typing.Union[str, RelationPath]],
) -> typing.Set[str]:
    """
    Returns the relation paths granted when ``requested`` is matched against ``allowed``.
    Both sides are unnested first, so a path is granted only if it is a prefix of something
    on both sides.
    """
    return unnest_all(requested) & unnest_all(allowed)


def ordered_intersection(
    requested: typing.Iterable[typing.Union[str, RelationPath]],
    allowed: typing.Iterable[typing.Union[str, RelationPath]],
    key: typing.Callable[[str], str] = str,
) -> typing.List[str]:
    """
    Same as :py:func:`intersect`, but the result follows the order in which the paths
    appear in the unnested ``allowed``, so that downstream loading is deterministic.

    ``key`` maps each unnested allowed path to the form ``requested`` is written in before
    they are compared.  The allowed paths themselves are returned.
    """
    granted = unnest_all(requested)
    return [p for p in unique(u for a in allowed for u in unnest(a)) if key(p) in granted]


T = typing.TypeVar("T", bound=typing.Hashable)


def unique(items: typing.Iterable[T]) -> typing.List[T]:
    """
    Removes duplicates, keeping the first occurrence of each item.
    """
    seen: typing.Set[T] = set()
    result: typing.List[T] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def flatten_specs(specs: typing.Sequence[typing.Any]) -> typing.Sequence[typing.Any]:
    """
    Allows the relation specs to be given either as varargs or as a single list.
    """
    if len(specs) == 1:
        only = specs[0]
        if isinstance(only, collections.abc.Iterable) and not isinstance(
            only, (str, collections.abc.Mapping, RelationSpec)
        ):
            return list(only)
    return specs


def _is_callback(value: typing.Any) -> bool:
    return callable(value) and not isinstance(value, type)


def iter_specs(specs: typing.Iterable[RelationSpecLike]) -> typing.Iterator[RelationSpec]:
    for spec in specs:
        if isinstance(spec, RelationSpec):
            yield spec
        elif isinstance(spec, str):
            yield RelationSpec(spec)
        elif isinstance(spec, collections.abc.Mapping):
            for path, value in spec.items():
                if value is None:
                    yield RelationSpec(path)
                elif isinstance(value, type):
                    yield RelationSpec(path, resource_type=value)
                elif _is_callback(value):
                    yield RelationSpec(path, callback=value)
                else:
                    raise InvalidDeclarationError(f"unsupported value for relation {path}: {value!r}")
        else:
            raise InvalidDeclarationError(f"unsupported relation specification: {spec!r}")


def extract_callbacks(
    specs: typing.Iterable[RelationSpecLike],
) -> typing.Tuple[typing.List[str], typing.Dict[str, Callback]]:
    """
    Splits relation specs into the bare dotted paths and a table of callbacks keyed by path.
    """
    paths: typing.List[str] = []
    callbacks: typing.Dict[str, Callback] = {}
    for spec in iter_specs(specs):
        paths.append(spec.path)
        if spec.callback is not None:
            callbacks[spec.path] = spec.callback
    return paths, callbacks
