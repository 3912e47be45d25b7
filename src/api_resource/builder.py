"""
The :py:class:`Builder` decides which relations a resource serializes, eager-loads them and
hands them down to the resource tree.

.. code-block:: python

   payload = (
       PostResource.build(posts)
       .with_request(request)
       .with_relations("author")
       .with_optional_relations({"comments.author": lambda author: author.touch()})
       .with_context({"viewer": viewer})
       .to_array(request)
   )

Relations given to :py:meth:`Builder.with_relations` are always granted.  Relations given to
:py:meth:`Builder.with_optional_relations` are granted only as far as the client asked for them
(``?load=comments``), so a client can never reach a relation the developer did not allow.
"""
import collections.abc
import logging
import typing

from .collection import CollectionResource
from .exceptions import InvalidRelationPathError, UnsupportedOperationError
from .interfaces import NativeInspector, Paginator
from .relations import (
    Callback,
    RelationPath,
    RelationSpecLike,
    extract_callbacks,
    flatten_specs,
    ordered_intersection,
    split,
    unique,
)
from .request import DEFAULT_PARAM, current_request, requested_relations
from .resource import Resource
from .response import JSONResponse
from .utils import is_collection

logger = logging.getLogger(__name__)

BuiltResource = typing.Union[Resource, CollectionResource]


def is_collection_like(resourceable: typing.Any) -> bool:
    return (
        isinstance(resourceable, (Paginator, collections.abc.Mapping))
        or is_collection(resourceable)
    )


def _related_as_list(
    inspector: NativeInspector, entity: typing.Any, name: str, value: typing.Any
) -> typing.List[typing.Any]:
    if value is None:
        return []
    if inspector.relation_kind(entity, name).is_singular:
        return [value]
    if isinstance(value, collections.abc.Mapping):
        return list(value.values())
    return list(value)


def apply_callback(
    inspector: NativeInspector,
    entity: typing.Any,
    path: typing.Union[str, RelationPath],
    callback: Callback,
) -> None:
    """
    Calls ``callback`` with whatever the dotted ``path`` leads to from ``entity``.  Along the
    way, plural relations fan out, so the callback is called once per leaf reached.
    """
    path = RelationPath.parse(path)
    value = inspector.fetch_related(entity, path.head)
    if len(path) == 1:
        callback(value)
        return
    for item in _related_as_list(inspector, entity, path.head, value):
        apply_callback(inspector, item, path.tail, callback)


class Builder:
    resourceable: typing.Any
    resource_type: typing.Type[Resource]
    _resource: BuiltResource
    _relations: typing.List[str]
    _requested_relations: typing.Optional[typing.List[str]]
    _callbacks: typing.Dict[str, Callback]
    _context: typing.Any

    def _make_resource(self) -> BuiltResource:
        if isinstance(self.resourceable, (Resource, CollectionResource)):
            return self.resourceable
        if is_collection_like(self.resourceable):
            return self.resource_type.collection(self.resourceable)
        return self.resource_type(self.resourceable)

    def get_resource(self) -> BuiltResource:
        return self._resource

    @property
    def relations(self) -> typing.List[str]:
        """
        The relations granted so far, without duplicates.
        """
        return unique(self._relations)

    @property
    def requested_relations(self) -> typing.Optional[typing.List[str]]:
        """
        The (canonicalized) relation names the client asked for, or :py:const:`None` if they
        were never given.
        """
        if self._requested_relations is None:
            return None
        return list(self._requested_relations)

    # configuration

    def with_request(self, request: typing.Any, param: str = DEFAULT_PARAM) -> "Builder":
        """
        Reads the requested relations from the ``param`` parameter of ``request``.
        """
        return self.with_requested_relations(requested_relations(request, param))

    def with_requested_relations(self, *names: typing.Union[str, typing.Iterable[str]]) -> "Builder":
        canonicalized: typing.List[str] = []
        for name in flatten_specs(names):
            try:
                path = RelationPath.parse(name)
            except InvalidRelationPathError as e:
                logger.debug("ignoring requested relation: %s", e.message)
                continue
            canonicalized.append(self.resource_type.canonicalize_relation_path(path))
        self._requested_relations = (self._requested_relations or []) + canonicalized
        return self

    def with_relations(self, *specs: typing.Union[RelationSpecLike, typing.Iterable[RelationSpecLike]]) -> "Builder":
        paths, callbacks = extract_callbacks(flatten_specs(specs))
        self._callbacks.update(callbacks)
        self._relations.extend(paths)
        return self

    def with_optional_relations(
        self, *specs: typing.Union[RelationSpecLike, typing.Iterable[RelationSpecLike]]
    ) -> "Builder":
        """
        Grants the given relations as far as the client requested them.  If no requested
        relations were given yet, they are read from the request bound with
        :py:func:`~api_resource.request.bind_request`.
        """
        paths, callbacks = extract_callbacks(flatten_specs(specs))
        self._callbacks.update(callbacks)
        if self._requested_relations is None:
            self.with_request(current_request())
        return self.with_relations(
            ordered_intersection(
                self._requested_relations or [], paths, key=self.resource_type.canonicalize_relation_path
            )
        )

    def with_context(self, context: typing.Any) -> "Builder":
        self._context = context
        return self

    # preparation

    def _loadable_entities(self) -> typing.List[typing.Any]:
        if isinstance(self._resource, CollectionResource):
            entities = self._resource.entities()
        else:
            entities = [self._resource.resource]
        return [e for e in entities if e is not None]

    def prepare(self) -> "Builder":
        """
        Eager-loads the granted relations, applies the callbacks and passes the relations and
        the context down to the resource.  Calling it more than once is harmless.
        """
        relations = unique(self._relations)
        self._relations = relations
        logger.debug("preparing %r with relations %r", self._resource, relations)

        entities = self._loadable_entities()
        if not relations or not entities:
            logger.debug("nothing to eager-load for %r", self._resource)
        else:
            inspector = self.resource_type.get_inspector()
            inspector.load_missing(entities, relations)
            for relation in relations:
                callback = self._callbacks.get(relation)
                if callback is None:
                    continue
                logger.debug("applying callback to %s", relation)
                for entity in entities:
                    apply_callback(inspector, entity, relation, callback)

        self._resource.set_relations([split(r) for r in relations])
        self._resource.set_context(self._context)
        return self

    # terminal operations

    def to_array(self, request: typing.Any = None) -> typing.Any:
        return self.prepare().get_resource().resolve(request)

    def to_response(self, request: typing.Any = None) -> JSONResponse:
        return self.prepare().get_resource().to_response(request)

    def to_paginator(self, request: typing.Any = None) -> typing.Dict[str, typing.Any]:
        """
        Returns the wrapped data along with the ``links`` and ``meta`` pagination information.

        :raises UnsupportedOperationError: if the resourceable is not a paginator.
        """
        resource = self._resource
        if not isinstance(resource, CollectionResource) or not resource.is_paginated:
            raise UnsupportedOperationError("to_paginator", self.resourceable)
        return typing.cast(CollectionResource, self.prepare().get_resource()).to_paginator(request)

    def __repr__(self) -> str:
        return f"Builder({self.resource_type.__name__}, {self._resource!r})"

    def __init__(self, resourceable: typing.Any, resource_type: typing.Type[Resource]):
        self.resourceable = resourceable
        self.resource_type = resource_type
        self._relations = []
        self._requested_relations = None
        self._callbacks = {}
        self._context = None
        self._resource = self._make_resource()


def build(resourceable: typing.Any, resource_type: typing.Type[Resource]) -> Builder:
    return Builder(resourceable, resource_type)
