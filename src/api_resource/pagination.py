import math
import typing
import urllib.parse

from .interfaces import Paginator


class LengthAwarePaginator(Paginator):
    """
    A page of items out of a result set whose total size is known.

    :param Sequence[Any] items: the items on the current page.
    :param int total: the number of items in the whole result set.
    :param int per_page: the page size.
    :param int current_page: the 1-based page number.
    :param str path: the base URL the page links are built from.
    :param Mapping[str, Any] query: extra query parameters carried over to the page links.
    :param str page_name: the name of the query parameter holding the page number.
    """

    _items: typing.List[typing.Any]
    _total: int
    _per_page: int
    _current_page: int
    _path: str
    query: typing.Dict[str, typing.Any]
    page_name: str

    @property
    def items(self) -> typing.List[typing.Any]:
        return self._items

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def per_page(self) -> int:
        return self._per_page

    @property
    def total(self) -> int:
        return self._total

    @property
    def last_page(self) -> int:
        return max(int(math.ceil(self._total / self._per_page)), 1)

    @property
    def path(self) -> str:
        return self._path

    @property
    def first_item(self) -> typing.Optional[int]:
        if not self._items:
            return None
        return (self._current_page - 1) * self._per_page + 1

    @property
    def last_item(self) -> typing.Optional[int]:
        first_item = self.first_item
        if first_item is None:
            return None
        return first_item + len(self._items) - 1

    def has_more_pages(self) -> bool:
        return self._current_page < self.last_page

    def url(self, page: int) -> str:
        page = max(page, 1)
        query = {**self.query, self.page_name: page}
        separator = "&" if "?" in self._path else "?"
        return f"{self._path}{separator}{urllib.parse.urlencode(query, doseq=True)}"

    def previous_page_url(self) -> typing.Optional[str]:
        if self._current_page <= 1:
            return None
        return self.url(self._current_page - 1)

    def next_page_url(self) -> typing.Optional[str]:
        if not self.has_more_pages():
            return None
        return self.url(self._current_page + 1)

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        return {
            "current_page": self._current_page,
            "first_page_url": self.url(1),
            "from": self.first_item,
            "last_page": self.last_page,
            "last_page_url": self.url(self.last_page),
            "next_page_url": self.next_page_url(),
            "path": self._path,
            "per_page": self._per_page,
            "prev_page_url": self.previous_page_url(),
            "to": self.last_item,
            "total": self._total,
        }

    def __init__(
        self,
        items: typing.Iterable[typing.Any],
        total: int,
        per_page: int,
        current_page: int = 1,
        path: str = "/",
        query: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        page_name: str = "page",
    ):
        if per_page < 1:
            raise ValueError(f"per_page must be positive: {per_page}")
        self._items = list(items)
        self._total = total
        self._per_page = per_page
        self._current_page = max(current_page, 1)
        self._path = path
        self.query = dict(query or {})
        self.page_name = page_name
