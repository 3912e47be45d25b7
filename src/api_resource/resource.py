"""
:py:class:`Resource` turns one native entity into a tree of plain values.

Synopsis
--------

.. code-block:: python

   class UserResource(SQLAResource):
       def to_array(self, request):
           return [
               self.merge_attributes("id", "name"),
           ]

   class PostResource(SQLAResource):
       class Meta:
           casts = {"published_at": "date:%Y-%m-%d"}

       def to_array(self, request):
           return [
               self.merge_attributes("id", "title", "published_at"),
               self.merge_when_explicitly_loaded({"author": UserResource, "comments": CommentResource}),
               self.merge_context("viewer"),
           ]

   PostResource.build(post).with_optional_relations("author", "comments.author").to_array(request)

A relation is only ever serialized if the builder granted it; see
:py:meth:`Resource.merge_when_explicitly_loaded`.
"""
import collections.abc
import re
import typing

from . import wrapping
from .carriers import ContextCarrier, RelationCarrier
from .declarative import Meta, declare
from .exceptions import InvalidDeclarationError
from .interfaces import NativeInspector
from .relations import RelationPath, RelationSpec, flatten_specs
from .response import JSONResponse, ResourceResponse
from .utils import UNSPECIFIED
from .values import (
    MISSING,
    Fragments,
    MergeValue,
    PotentiallyMissing,
    Resolvable,
    filter_data,
    is_missing,
    merge_when,
    when,
)

if typing.TYPE_CHECKING:
    from .builder import Builder  # noqa: F401
    from .collection import CollectionResource  # noqa: F401

_date_cast = re.compile(r"^date(?:time)?:(.+)$")

ExplicitRelation = typing.Union[
    str,
    RelationSpec,
    typing.Mapping[str, typing.Optional[typing.Type["Resource"]]],
]


def _iter_explicit_relations(
    relations: typing.Iterable[ExplicitRelation],
) -> typing.Iterator[typing.Tuple[str, typing.Optional[typing.Type["Resource"]]]]:
    for relation in relations:
        if isinstance(relation, str):
            yield relation, None
        elif isinstance(relation, RelationSpec):
            yield relation.path, relation.resource_type
        elif isinstance(relation, collections.abc.Mapping):
            for name, resource_type in relation.items():
                if resource_type is not None and not (
                    isinstance(resource_type, type) and issubclass(resource_type, Resource)
                ):
                    raise InvalidDeclarationError(
                        f"relation {name} must be mapped to a Resource subclass: {resource_type!r}"
                    )
                yield name, resource_type
        else:
            raise InvalidDeclarationError(f"unsupported relation declaration: {relation!r}")


class Resource(Resolvable, PotentiallyMissing):
    resource: typing.Any
    """
    The native entity this resource serializes.
    """
    additional_data: typing.Dict[str, typing.Any]
    relation_carrier: RelationCarrier
    context_carrier: ContextCarrier

    _meta: typing.ClassVar[Meta] = Meta()
    wrap_registry: typing.ClassVar[wrapping.WrapRegistry] = wrapping.registry

    def __init_subclass__(cls, **kwargs: typing.Any) -> None:
        super().__init_subclass__(**kwargs)
        declare(cls)

    # wrapping

    @classmethod
    def wrap(cls, value: typing.Optional[str]) -> None:
        """
        Sets both the single-item and the collection wrap keys of this resource type.
        """
        cls.wrap_registry.wrap(cls, value)

    @classmethod
    def wrap_collection(cls, value: typing.Optional[str]) -> None:
        cls.wrap_registry.wrap_collection(cls, value)

    @classmethod
    def without_wrapping(cls) -> None:
        cls.wrap_registry.without_wrapping(cls)

    @classmethod
    def wrapper(cls) -> typing.Optional[str]:
        return cls.wrap_registry.wrapper(cls)

    @classmethod
    def collection_wrapper(cls) -> typing.Optional[str]:
        return cls.wrap_registry.collection_wrapper(cls)

    # factories

    @classmethod
    def build(cls, resourceable: typing.Any) -> "Builder":
        """
        Returns a new builder that converts ``resourceable`` (an entity, a collection of
        entities or a paginator) into this resource type.
        """
        from .builder import Builder

        return Builder(resourceable, cls)

    @classmethod
    def collection(cls, resource: typing.Any) -> "CollectionResource":
        from .collection import CollectionResource

        return CollectionResource(resource, cls)

    # configuration

    @classmethod
    def get_inspector(cls) -> NativeInspector:
        inspector = cls._meta.inspector
        if inspector is None:
            raise InvalidDeclarationError(f"no inspector is declared for {cls.__name__}")
        return inspector

    @classmethod
    def canonicalize_relation_name(cls, name: str) -> str:
        return cls._meta.relation_naming(name)

    @classmethod
    def canonicalize_relation_path(cls, path: typing.Union[str, RelationPath]) -> str:
        """
        Applies the naming style to each segment of a dotted relation path.
        """
        return ".".join(cls.canonicalize_relation_name(s) for s in RelationPath.parse(path))

    @property
    def preserve_keys(self) -> bool:
        return self._meta.preserve_keys

    # relations & context

    def set_relations(self, relations: typing.Iterable[typing.Sequence[str]]) -> None:
        self.relation_carrier.set_relations(relations)

    def get_top_level_relations(self) -> typing.List[str]:
        return self.relation_carrier.get_top_level_relations()

    def get_nested_relations(self, name: typing.Optional[str] = None) -> typing.List[typing.List[str]]:
        return self.relation_carrier.get_nested_relations(name)

    def set_context(self, context: typing.Any) -> None:
        self.context_carrier.set_context(context)

    def get_context(self, key: typing.Optional[str] = None) -> typing.Any:
        return self.context_carrier.get_context(key)

    # serialization

    def to_array(self, request: typing.Any = None) -> Fragments:
        """
        Returns the data for the entity.  Subclasses override this; the default returns every
        plain attribute the inspector knows of.
        """
        if self.resource is None:
            return {}
        return self.get_inspector().fetch_attributes(self.resource)

    def resolve(self, request: typing.Any = None) -> typing.Optional[typing.Dict[str, typing.Any]]:
        if self.resource is None:
            return None
        return filter_data(self.to_array(request), request)

    def is_missing(self) -> bool:
        return is_missing(self.resource)

    def with_(self, request: typing.Any = None) -> typing.Dict[str, typing.Any]:
        """
        Returns top-level data to be merged into the response envelope.
        """
        return {}

    def additional(self, data: typing.Mapping[str, typing.Any]) -> "Resource":
        self.additional_data = dict(data)
        return self

    def with_response(self, request: typing.Any, response: JSONResponse) -> None:
        """
        Called with the response before it is returned from :py:meth:`to_response`.
        """

    def to_response(self, request: typing.Any = None) -> JSONResponse:
        return ResourceResponse(self).to_response(request)

    # conditional helpers

    def when(self, condition: typing.Any, value: typing.Any, default: typing.Any = MISSING) -> typing.Any:
        return when(condition, value, default)

    def merge_when(self, condition: typing.Any, value: typing.Any) -> typing.Any:
        return merge_when(condition, value)

    def when_loaded(
        self, relation: str, value: typing.Any = UNSPECIFIED, default: typing.Any = MISSING
    ) -> typing.Any:
        """
        Returns the related entities (or ``value``) if the relation is loaded, ``default`` otherwise.
        """
        inspector = self.get_inspector()
        if self.resource is None or not inspector.is_relation_loaded(self.resource, relation):
            return default() if callable(default) else default
        if value is UNSPECIFIED:
            return inspector.fetch_related(self.resource, relation)
        return value() if callable(value) else value

    def merge_attributes(self, *attributes: typing.Union[str, typing.Iterable[str]]) -> MergeValue:
        """
        Returns a merge value holding the named attributes.  Attributes cast as
        ``date:<format>`` or ``datetime:<format>`` are rendered with that format.
        """
        names = typing.cast(typing.Sequence[str], flatten_specs(attributes))
        inspector = self.get_inspector()
        casts = {**inspector.get_casts(self.resource), **self._meta.casts}
        data: typing.Dict[str, typing.Any] = {}
        for name in names:
            value = inspector.fetch_attribute(self.resource, name)
            cast = casts.get(name)
            if value is not None and cast is not None:
                m = _date_cast.match(cast)
                if m is not None:
                    value = value.strftime(m.group(1))
            data[name] = value
        return MergeValue(data)

    def merge_when_explicitly_loaded(self, *relations: ExplicitRelation) -> MergeValue:
        """
        Returns a merge value holding the given relations, restricted to those the builder
        granted to this resource.  Relations can be given as names, or as a mapping of names
        to the resource type the related entities are wrapped in.
        """
        granted = {
            self.canonicalize_relation_name(name): name for name in self.get_top_level_relations()
        }
        mergeable: typing.Dict[str, typing.Any] = {}
        for relation, resource_type in _iter_explicit_relations(flatten_specs(relations)):
            # granted names are the entity's own, whatever style the key is written in
            name = granted.get(self.canonicalize_relation_name(relation))
            if name is not None:
                mergeable[relation] = self.wrap_when_loaded_with(name, resource_type)
        return MergeValue(mergeable)

    def wrap_when_loaded_with(
        self, relation: str, resource_type: typing.Optional[typing.Type["Resource"]]
    ) -> typing.Any:
        loaded = self.when_loaded(relation)
        if resource_type is None or is_missing(loaded):
            return loaded

        nested: typing.Union["Resource", "CollectionResource"]
        if self.is_singular_relation(relation):
            if loaded is None:
                return None
            nested = resource_type(loaded)
        else:
            nested = resource_type.collection(loaded if loaded is not None else [])
        nested.set_relations(self.get_nested_relations(relation))
        nested.set_context(self.get_context())
        return nested

    def merge_context(self, key: typing.Optional[str] = None) -> typing.Any:
        data = self.get_context(key)
        return merge_when(data, data)

    def is_singular_relation(self, relation: str) -> bool:
        return self.get_inspector().relation_kind(self.resource, relation).is_singular

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.resource!r})"

    def __init__(self, resource: typing.Any):
        self.resource = resource
        self.additional_data = {}
        self.relation_carrier = RelationCarrier()
        self.context_carrier = ContextCarrier()
