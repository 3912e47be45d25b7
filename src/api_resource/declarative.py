"""
Handling of the ``Meta`` inner class resources declare their configuration with.

.. code-block:: python

   class PostResource(Resource):
       class Meta:
           wrap = "post"
           wrap_collection = "posts"
           casts = {"published_at": "date:%Y-%m-%d"}
           relation_naming = "camel"
           inspector = SQLAInspector()

       def to_array(self, request):
           ...

A subclass inherits its bases' ``Meta`` and only overrides what its own ``Meta`` names.
"""
import collections.abc
import dataclasses
import typing

from .exceptions import InvalidDeclarationError
from .interfaces import NativeInspector
from .utils import UNSPECIFIED
from .utils.formatting import NAMING_STYLES, camel
from .wrapping import WrapKey, WrapSettings


@dataclasses.dataclass(frozen=True)
class Meta:
    wrap: WrapKey = UNSPECIFIED
    wrap_collection: WrapKey = UNSPECIFIED
    casts: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)
    preserve_keys: bool = False
    relation_naming: typing.Callable[[str], str] = camel
    inspector: typing.Optional[NativeInspector] = None


_known_keys = frozenset(f.name for f in dataclasses.fields(Meta))


def _handle_relation_naming(value: typing.Any) -> typing.Callable[[str], str]:
    if isinstance(value, str):
        try:
            return NAMING_STYLES[value]
        except KeyError:
            raise InvalidDeclarationError(
                f"unknown relation naming style {value!r}; expected one of {', '.join(NAMING_STYLES)}"
            )
    if not callable(value):
        raise InvalidDeclarationError(f"relation_naming must be a style name or a callable: {value!r}")
    return value


def _handle_wrap_key(key: str, value: typing.Any) -> WrapKey:
    if value is not None and not isinstance(value, str):
        raise InvalidDeclarationError(f"{key} must be a string or None: {value!r}")
    return value


def handle_meta(meta: type, base: typing.Optional[Meta] = None) -> Meta:
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    unknown = set(attrs) - _known_keys
    if unknown:
        raise InvalidDeclarationError(f"unknown Meta attributes: {', '.join(sorted(unknown))}")

    base = base if base is not None else Meta()
    changes: typing.Dict[str, typing.Any] = {}

    for key in ("wrap", "wrap_collection"):
        if key in attrs:
            changes[key] = _handle_wrap_key(key, attrs[key])
    if "casts" in attrs:
        casts = attrs["casts"]
        if not isinstance(casts, collections.abc.Mapping) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in casts.items()
        ):
            raise InvalidDeclarationError("casts must be a mapping of attribute names to cast strings")
        changes["casts"] = {**base.casts, **casts}
    if "preserve_keys" in attrs:
        changes["preserve_keys"] = bool(attrs["preserve_keys"])
    if "relation_naming" in attrs:
        changes["relation_naming"] = _handle_relation_naming(attrs["relation_naming"])
    if "inspector" in attrs:
        inspector = attrs["inspector"]
        if inspector is not None and not isinstance(inspector, NativeInspector):
            raise InvalidDeclarationError(f"inspector must be a NativeInspector: {inspector!r}")
        changes["inspector"] = inspector
    return dataclasses.replace(base, **changes)


def declare(class_: type) -> None:
    """
    Processes the ``Meta`` the class declares in its own body, if any.
    """
    meta = class_.__dict__.get("Meta")
    if meta is None:
        return
    base: typing.Optional[Meta] = getattr(class_, "_meta", None)
    class_._meta = handle_meta(meta, base)  # type: ignore
    class_._wrap_declaration = WrapSettings(  # type: ignore
        wrap=class_._meta.wrap if "wrap" in vars(meta) else UNSPECIFIED,  # type: ignore
        wrap_collection=(
            class_._meta.wrap_collection if "wrap_collection" in vars(meta) else UNSPECIFIED  # type: ignore
        ),
    )
