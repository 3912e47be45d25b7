import collections.abc
import typing

from .carriers import ContextCarrier, RelationCarrier
from .exceptions import UnsupportedOperationError
from .interfaces import Paginator
from .resource import Resource
from .response import JSONResponse, PaginatedResourceResponse, ResourceResponse
from .values import PotentiallyMissing, Resolvable, is_missing

SerializedCollection = typing.Union[typing.List[typing.Any], typing.Dict[typing.Any, typing.Any]]


class CollectionResource(Resolvable, PotentiallyMissing):
    """
    A :py:class:`CollectionResource` serializes a collection of native entities, each of them
    through a resource of type :py:attr:`collects`.

    The collection may be a sequence, a mapping (a keyed collection, whose keys survive
    serialization when the item type declares ``preserve_keys``) or a
    :py:class:`~api_resource.interfaces.Paginator`.  Relations and context set on the
    collection are handed to every item.
    """

    resource: typing.Any
    """
    The collection (or paginator) as given.  It is never modified.
    """
    collects: typing.Type[Resource]
    collection: typing.List[typing.Tuple[typing.Any, Resource]]
    """
    The item resources along with their keys in the original collection.
    """
    preserve_keys: bool = False
    additional_data: typing.Dict[str, typing.Any]
    relation_carrier: RelationCarrier
    context_carrier: ContextCarrier

    @property
    def is_paginated(self) -> bool:
        return isinstance(self.resource, Paginator)

    @property
    def is_keyed(self) -> bool:
        return isinstance(self.resource, collections.abc.Mapping)

    def _collect(self, resource: typing.Any) -> typing.List[typing.Tuple[typing.Any, Resource]]:
        if resource is None or is_missing(resource):
            return []
        if isinstance(resource, Paginator):
            pairs: typing.Iterable[typing.Tuple[typing.Any, typing.Any]] = enumerate(resource.items)
        elif isinstance(resource, collections.abc.Mapping):
            pairs = resource.items()
        else:
            pairs = enumerate(resource)
        return [
            (key, item if isinstance(item, Resource) else self.collects(item)) for key, item in pairs
        ]

    def items(self) -> typing.List[Resource]:
        return [item for _, item in self.collection]

    def entities(self) -> typing.List[typing.Any]:
        """
        Returns the native entities held by the collection, with the resource envelopes removed.
        """
        return [item.resource for _, item in self.collection]

    # relations & context

    def set_relations(self, relations: typing.Iterable[typing.Sequence[str]]) -> None:
        self.relation_carrier.set_relations(relations)
        self._propagate()

    def get_top_level_relations(self) -> typing.List[str]:
        return self.relation_carrier.get_top_level_relations()

    def get_nested_relations(self, name: typing.Optional[str] = None) -> typing.List[typing.List[str]]:
        return self.relation_carrier.get_nested_relations(name)

    def set_context(self, context: typing.Any) -> None:
        self.context_carrier.set_context(context)
        self._propagate()

    def get_context(self, key: typing.Optional[str] = None) -> typing.Any:
        return self.context_carrier.get_context(key)

    def _propagate(self) -> None:
        relations = self.relation_carrier.get_relations()
        context = self.context_carrier.get_context()
        for _, item in self.collection:
            item.set_relations(relations)
            item.set_context(context)
        if self.collection:
            self.preserve_keys = self.collection[0][1].preserve_keys

    # serialization

    def to_array(self, request: typing.Any = None) -> SerializedCollection:
        self._propagate()
        if self.preserve_keys and self.is_keyed:
            return {key: item.resolve(request) for key, item in self.collection}
        return [item.resolve(request) for _, item in self.collection]

    def resolve(self, request: typing.Any = None) -> SerializedCollection:
        return self.to_array(request)

    def is_missing(self) -> bool:
        return is_missing(self.resource)

    def with_(self, request: typing.Any = None) -> typing.Dict[str, typing.Any]:
        return {}

    def additional(self, data: typing.Mapping[str, typing.Any]) -> "CollectionResource":
        self.additional_data = dict(data)
        return self

    def with_response(self, request: typing.Any, response: JSONResponse) -> None:
        pass

    def to_response(self, request: typing.Any = None) -> JSONResponse:
        if self.is_paginated:
            return PaginatedResourceResponse(self).to_response(request)
        return ResourceResponse(self).to_response(request)

    def to_paginator(self, request: typing.Any = None) -> typing.Dict[str, typing.Any]:
        """
        Returns the wrapped data along with the pagination information.

        :raises UnsupportedOperationError: if the collection is not a paginator.
        """
        if not self.is_paginated:
            raise UnsupportedOperationError("to_paginator", self.resource)
        return PaginatedResourceResponse(self).to_paginator(request)

    def __iter__(self) -> typing.Iterator[Resource]:
        return iter(self.items())

    def __len__(self) -> int:
        return len(self.collection)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.collects.__name__}, {len(self.collection)} items)"

    def __init__(self, resource: typing.Any, collects: typing.Type[Resource]):
        self.resource = resource
        self.collects = collects
        self.collection = self._collect(resource)
        self.additional_data = {}
        self.relation_carrier = RelationCarrier()
        self.context_carrier = ContextCarrier()
