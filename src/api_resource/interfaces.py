"""
This module contains a series of interface definitions that need to be
implemented by the backend providers (ORM adapters, paginators and request objects).

"""
import abc
import enum
import typing


class RelationKind(enum.Enum):
    """
    The kind of a relation between two native objects.  Only the cardinality matters
    to serialization; :py:attr:`is_singular` tells it.
    """

    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_ONE_THROUGH = "has_one_through"
    MORPH_ONE = "morph_one"
    MORPH_TO = "morph_to"
    HAS_MANY = "has_many"
    HAS_MANY_THROUGH = "has_many_through"
    BELONGS_TO_MANY = "belongs_to_many"
    MORPH_MANY = "morph_many"
    MORPH_TO_MANY = "morph_to_many"

    @property
    def is_singular(self) -> bool:
        return self in _singular_relation_kinds


_singular_relation_kinds = frozenset(
    [
        RelationKind.BELONGS_TO,
        RelationKind.HAS_ONE,
        RelationKind.HAS_ONE_THROUGH,
        RelationKind.MORPH_ONE,
        RelationKind.MORPH_TO,
    ]
)


class NativeEntityLoader(metaclass=abc.ABCMeta):
    """
    A :py:class:`NativeEntityLoader` eager-loads relations of native objects.
    """

    @abc.abstractmethod
    def load_missing(self, entities: typing.Sequence[typing.Any], paths: typing.Sequence[str]) -> None:
        """
        Eager-loads the relations denoted by the dotted ``paths`` on every entity,
        leaving relations that are already loaded untouched.

        :param Sequence[Any] entities: native objects to load the relations on.
        :param Sequence[str] paths: dotted relation paths such as ``"comments.author"``.
        """
        ...  # pragma: nocover


class NativeRelationshipInspector(metaclass=abc.ABCMeta):
    """
    A :py:class:`NativeRelationshipInspector` reports metadata about the relations of native objects.
    """

    @abc.abstractmethod
    def relation_kind(self, entity: typing.Any, name: str) -> RelationKind:
        """
        Returns the kind of the relation named ``name``.

        :raises MissingRelationError: if the entity has no such relation.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def fetch_related(self, entity: typing.Any, name: str) -> typing.Any:
        """
        Returns the related native object (or an iterable of them) for the relation named ``name``.

        :raises MissingRelationError: if the entity has no such relation.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def is_relation_loaded(self, entity: typing.Any, name: str) -> bool:
        """
        Tells if the relation named ``name`` can be read without hitting the data source.
        """
        ...  # pragma: nocover


class NativeAttributeInspector(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def fetch_attribute(self, entity: typing.Any, name: str) -> typing.Any:
        """
        Returns the value of the attribute named ``name``.

        :raises MissingAttributeError: if the entity has no such attribute.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def fetch_attributes(self, entity: typing.Any) -> typing.Dict[str, typing.Any]:
        """
        Returns every plain (non-relation) attribute of the entity.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def get_casts(self, entity: typing.Any) -> typing.Mapping[str, str]:
        """
        Returns the casts declared on the native side, such as ``{"published_at": "date:%Y-%m-%d"}``.
        """
        ...  # pragma: nocover


class NativeInspector(NativeEntityLoader, NativeRelationshipInspector, NativeAttributeInspector):
    """
    The full set of capabilities resources need from a backend.
    """


class Paginator(metaclass=abc.ABCMeta):
    """
    A :py:class:`Paginator` is a page of native objects along with what is known about the whole result set.
    """

    @property
    @abc.abstractmethod
    def items(self) -> typing.Sequence[typing.Any]:
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def current_page(self) -> int:
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def per_page(self) -> int:
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def total(self) -> typing.Optional[int]:
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def last_page(self) -> typing.Optional[int]:
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def path(self) -> str:
        ...  # pragma: nocover

    @abc.abstractmethod
    def url(self, page: int) -> str:
        ...  # pragma: nocover

    @abc.abstractmethod
    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """
        Returns the pagination information, keyed the way the paginated envelope expects
        (``current_page``, ``first_page_url``, ``from``, ``last_page``, ``last_page_url``,
        ``next_page_url``, ``path``, ``per_page``, ``prev_page_url``, ``to``, ``total``).
        """
        ...  # pragma: nocover

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)


class Request(typing.Protocol):
    def get(self, key: str, default: typing.Any = None) -> typing.Any:
        ...  # pragma: nocover
