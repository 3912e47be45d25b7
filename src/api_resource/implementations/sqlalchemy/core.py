import collections.abc
import logging
import typing
from collections import OrderedDict

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ...exceptions import MissingAttributeError, MissingRelationError
from ...interfaces import NativeInspector, RelationKind

logger = logging.getLogger(__name__)


def relation_kind_of(property: orm.RelationshipProperty) -> RelationKind:
    direction = property.direction
    if direction is orm.interfaces.MANYTOONE:
        return RelationKind.BELONGS_TO
    elif direction is orm.interfaces.ONETOMANY:
        return RelationKind.HAS_MANY if property.uselist else RelationKind.HAS_ONE
    else:
        return RelationKind.BELONGS_TO_MANY if property.uselist else RelationKind.HAS_ONE_THROUGH


def _cast_of(property: orm.ColumnProperty) -> typing.Optional[str]:
    cast = property.info.get("cast")
    if cast is None:
        for col in property.columns:
            cast = getattr(col, "info", {}).get("cast")
            if cast is not None:
                break
    return cast


class SQLADescriptor:
    """
    What the inspector knows of one mapped class: its column attributes in declaration order
    and its relationships.
    """

    mapper: orm.Mapper
    attrs_: "typing.Optional[OrderedDict[str, orm.ColumnProperty]]" = None
    rels_: "typing.Optional[OrderedDict[str, orm.RelationshipProperty]]" = None

    @property
    def class_(self) -> type:
        return self.mapper.class_

    def _populate_attrs_and_rels(self) -> None:
        if self.attrs_ is None:
            attrs: "OrderedDict[str, orm.ColumnProperty]" = OrderedDict()
            rels: "OrderedDict[str, orm.RelationshipProperty]" = OrderedDict()
            for sa_attr in self.mapper.iterate_properties:
                if isinstance(sa_attr, orm.ColumnProperty):
                    attrs[sa_attr.key] = sa_attr
                elif isinstance(sa_attr, orm.RelationshipProperty):
                    rels[sa_attr.key] = sa_attr
            self.attrs_ = attrs
            self.rels_ = rels

    @property
    def attributes(self) -> typing.Sequence[orm.ColumnProperty]:
        self._populate_attrs_and_rels()
        assert self.attrs_ is not None
        return list(self.attrs_.values())

    def get_relationship_by_name(self, name: str) -> orm.RelationshipProperty:
        self._populate_attrs_and_rels()
        assert self.rels_ is not None
        try:
            return self.rels_[name]
        except KeyError:
            raise MissingRelationError(self.class_, name)

    def has_relationship(self, name: str) -> bool:
        self._populate_attrs_and_rels()
        assert self.rels_ is not None
        return name in self.rels_

    def get_casts(self) -> typing.Dict[str, str]:
        casts: typing.Dict[str, str] = {}
        for sa_attr in self.attributes:
            cast = _cast_of(sa_attr)
            if cast is not None:
                casts[sa_attr.key] = cast
        return casts

    def __init__(self, mapper: orm.Mapper):
        self.mapper = mapper


class SQLAInspector(NativeInspector):
    """
    A :py:class:`~api_resource.interfaces.NativeInspector` for SQLAlchemy mapped objects.

    Casts are declared on the columns::

        published_at = sa.Column(sa.DateTime(), info={"cast": "datetime:%Y-%m-%d %H:%M"})
    """

    descrs: typing.Dict[type, SQLADescriptor]

    def descriptor_for(self, class_: type) -> SQLADescriptor:
        descr = self.descrs.get(class_)
        if descr is None:
            descr = self.descrs[class_] = SQLADescriptor(sa.inspect(class_))
        return descr

    def _relationship(self, entity: typing.Any, name: str) -> orm.RelationshipProperty:
        return self.descriptor_for(type(entity)).get_relationship_by_name(name)

    # NativeRelationshipInspector

    def relation_kind(self, entity: typing.Any, name: str) -> RelationKind:
        return relation_kind_of(self._relationship(entity, name))

    def fetch_related(self, entity: typing.Any, name: str) -> typing.Any:
        self._relationship(entity, name)
        return getattr(entity, name)

    def is_relation_loaded(self, entity: typing.Any, name: str) -> bool:
        self._relationship(entity, name)
        return name not in sa.inspect(entity).unloaded

    # NativeAttributeInspector

    def fetch_attribute(self, entity: typing.Any, name: str) -> typing.Any:
        if self.descriptor_for(type(entity)).has_relationship(name):
            raise MissingAttributeError(type(entity), name)
        try:
            return getattr(entity, name)
        except AttributeError:
            raise MissingAttributeError(type(entity), name)

    def fetch_attributes(self, entity: typing.Any) -> typing.Dict[str, typing.Any]:
        return {
            sa_attr.key: getattr(entity, sa_attr.key)
            for sa_attr in self.descriptor_for(type(entity)).attributes
        }

    def get_casts(self, entity: typing.Any) -> typing.Mapping[str, str]:
        if entity is None:
            return {}
        return self.descriptor_for(type(entity)).get_casts()

    # NativeEntityLoader

    def _load_batch(self, class_: type, name: str, entities: typing.Sequence[typing.Any]) -> None:
        session = orm.object_session(entities[0])
        pkey_cols = self.descriptor_for(class_).mapper.primary_key
        if session is None or len(pkey_cols) != 1:
            return
        ids = [sa.inspect(e).identity[0] for e in entities if sa.inspect(e).identity is not None]
        if not ids:
            return
        logger.debug("eager-loading %s.%s for %d entities", class_.__name__, name, len(ids))
        stmt = (
            sa.select(class_)
            .where(pkey_cols[0].in_(ids))
            .options(orm.selectinload(getattr(class_, name)))
        )
        session.execute(stmt).scalars().unique().all()

    def _load_level(self, entities: typing.Sequence[typing.Any], name: str) -> typing.List[typing.Any]:
        unloaded: "OrderedDict[type, typing.List[typing.Any]]" = OrderedDict()
        for entity in entities:
            self._relationship(entity, name)
            if name in sa.inspect(entity).unloaded:
                unloaded.setdefault(type(entity), []).append(entity)
        for class_, batch in unloaded.items():
            self._load_batch(class_, name, batch)

        related: typing.List[typing.Any] = []
        for entity in entities:
            # anything the batch could not reach loads lazily here
            value = getattr(entity, name)
            if value is None:
                continue
            if self._relationship(entity, name).uselist:
                related.extend(value.values() if isinstance(value, collections.abc.Mapping) else value)
            else:
                related.append(value)
        return related

    def load_missing(self, entities: typing.Sequence[typing.Any], paths: typing.Sequence[str]) -> None:
        for path in paths:
            current = [e for e in entities if e is not None]
            for name in path.split("."):
                if not current:
                    break
                current = self._load_level(current, name)

    def __init__(self):
        self.descrs = {}
