"""
Wrap keys are the top-level keys serialized data is nested under in a response.

They are configuration scoped to a resource type.  The declared values come from the
resource's ``Meta``; runtime overrides (:py:meth:`Resource.wrap` and friends) are recorded
in a :py:class:`WrapRegistry`, which can be reset between independent serialization passes.
Overrides are expected to be made once at startup.
"""
import dataclasses
import typing

from .utils import UNSPECIFIED, UnspecifiedType

DEFAULT_WRAP = "data"

WrapKey = typing.Union[UnspecifiedType, None, str]


@dataclasses.dataclass(frozen=True)
class WrapSettings:
    wrap: WrapKey = UNSPECIFIED
    """
    The key a single resource is wrapped in; :py:const:`None` disables wrapping.
    """
    wrap_collection: WrapKey = UNSPECIFIED
    """
    The key a collection of the resource is wrapped in; falls back to :py:attr:`wrap` when unspecified.
    """

    def merge(self, other: "WrapSettings") -> "WrapSettings":
        """
        Returns the settings with every unspecified field taken from ``other``.
        """
        return WrapSettings(
            wrap=self.wrap if self.wrap is not UNSPECIFIED else other.wrap,
            wrap_collection=(
                self.wrap_collection
                if self.wrap_collection is not UNSPECIFIED
                else other.wrap_collection
            ),
        )


class WrapRegistry:
    _overrides: typing.Dict[type, WrapSettings]

    def _update(self, resource_type: type, **kwargs: WrapKey) -> None:
        current = self._overrides.get(resource_type, WrapSettings())
        self._overrides[resource_type] = dataclasses.replace(current, **kwargs)

    def wrap(self, resource_type: type, value: typing.Optional[str]) -> None:
        self._update(resource_type, wrap=value, wrap_collection=value)

    def wrap_collection(self, resource_type: type, value: typing.Optional[str]) -> None:
        self._update(resource_type, wrap_collection=value)

    def without_wrapping(self, resource_type: type) -> None:
        self._update(resource_type, wrap=None, wrap_collection=None)

    def reset(self, resource_type: typing.Optional[type] = None) -> None:
        """
        Forgets the runtime overrides for ``resource_type``, or for every type if omitted.
        """
        if resource_type is None:
            self._overrides.clear()
        else:
            self._overrides.pop(resource_type, None)

    def settings_for(self, resource_type: type) -> WrapSettings:
        """
        Returns the effective settings of ``resource_type``.  Walking up the class hierarchy,
        a class's runtime override comes before what the class declares in its ``Meta``,
        and both come before anything its bases say.
        """
        settings = WrapSettings()
        for class_ in resource_type.__mro__:
            override = self._overrides.get(class_)
            if override is not None:
                settings = settings.merge(override)
            declared = class_.__dict__.get("_wrap_declaration")
            if declared is not None:
                settings = settings.merge(declared)
        return settings

    def wrapper(self, resource_type: type) -> typing.Optional[str]:
        wrap = self.settings_for(resource_type).wrap
        return DEFAULT_WRAP if wrap is UNSPECIFIED else typing.cast(typing.Optional[str], wrap)

    def collection_wrapper(self, resource_type: type) -> typing.Optional[str]:
        wrap_collection = self.settings_for(resource_type).wrap_collection
        if wrap_collection is UNSPECIFIED:
            return self.wrapper(resource_type)
        return typing.cast(typing.Optional[str], wrap_collection)

    def __init__(self):
        self._overrides = {}


registry = WrapRegistry()
