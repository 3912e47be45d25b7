"""
Capabilities shared by :py:class:`~api_resource.resource.Resource` and
:py:class:`~api_resource.collection.CollectionResource`.  Both hold one instance of each
carrier and expose the carrier's accessors under the same names.
"""
import typing

from .utils.data import data_get


class ContextCarrier:
    """
    Holds the caller-supplied context.  The context is shared by reference with every nested
    resource and is never modified by them.
    """

    _context: typing.Any = None

    def set_context(self, context: typing.Any) -> None:
        self._context = context

    def get_context(self, key: typing.Optional[str] = None) -> typing.Any:
        """
        Returns the context, or the value found in it at the dotted ``key``.
        """
        data = self._context
        if data and key:
            data = data_get(data, key)
        return data

    def __init__(self, context: typing.Any = None):
        self._context = context


class RelationCarrier:
    """
    Holds the relations granted to one resource, each split into its segments, e.g.
    ``[["author"], ["comments", "author"]]``.
    """

    _relations: typing.List[typing.List[str]]

    def set_relations(self, relations: typing.Iterable[typing.Sequence[str]]) -> None:
        self._relations = [list(r) for r in relations]

    def get_relations(self) -> typing.List[typing.List[str]]:
        return [list(r) for r in self._relations]

    def get_top_level_relations(self) -> typing.List[str]:
        """
        Returns the first segment of every relation, in order and with duplicates.
        """
        return [r[0] for r in self._relations if r]

    def get_nested_relations(self, name: typing.Optional[str] = None) -> typing.List[typing.List[str]]:
        """
        Returns what remains of every relation once its first segment is dropped.
        Relations with nothing remaining are left out.

        :param Optional[str] name: only consider relations whose first segment is ``name``.
        """
        return [
            list(r[1:]) for r in self._relations if len(r) > 1 and (name is None or r[0] == name)
        ]

    def __init__(self, relations: typing.Iterable[typing.Sequence[str]] = ()):
        self.set_relations(relations)
