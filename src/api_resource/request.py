"""
Request sources.  The only thing the builder needs from a request is the list of relation
names the client asked for, read from a query parameter (``load`` by default)::

    GET /posts?load=author,comments.author
    GET /posts?load[]=author&load[]=comments.author

The request being served can be bound for the current thread or task with
:py:func:`bind_request`; builders fall back to it when no requested relations were given.
"""
import collections.abc
import contextlib
import contextvars
import typing

from .interfaces import Request

DEFAULT_PARAM = "load"

_current_request: "contextvars.ContextVar[typing.Optional[Request]]" = contextvars.ContextVar(
    "api_resource_current_request", default=None
)


class MappingRequest:
    """
    A :py:class:`~api_resource.interfaces.Request` backed by a mapping of query parameters.
    """

    params: typing.Mapping[str, typing.Any]

    def get(self, key: str, default: typing.Any = None) -> typing.Any:
        return self.params.get(key, default)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.params)!r})"

    def __init__(self, params: typing.Optional[typing.Mapping[str, typing.Any]] = None, **kwargs: typing.Any):
        self.params = {**(params or {}), **kwargs}


def requested_relations(request: typing.Optional[Request], param: str = DEFAULT_PARAM) -> typing.List[str]:
    """
    Returns the relation names requested through ``param``, accepting either a list of names or
    a comma-separated string.  Blank names are dropped.
    """
    if request is None:
        return []
    value = request.get(param, None)
    if value is None:
        # bracketed names, as sent by clients serializing arrays PHP-style
        value = request.get(f"{param}[]", None)
    if value is None:
        return []
    if isinstance(value, str):
        names: typing.Iterable[typing.Any] = value.split(",")
    elif isinstance(value, collections.abc.Iterable):
        names = (n for v in value for n in (v.split(",") if isinstance(v, str) else [v]))
    else:
        names = [value]
    return [n.strip() for n in names if isinstance(n, str) and n.strip()]


def current_request() -> typing.Optional[Request]:
    return _current_request.get()


@contextlib.contextmanager
def bind_request(request: typing.Optional[Request]) -> typing.Iterator[typing.Optional[Request]]:
    token = _current_request.set(request)
    try:
        yield request
    finally:
        _current_request.reset(token)
