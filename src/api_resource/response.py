"""
Response envelopes.

A single resource resolves to ``{"data": {...}}`` by default; a paginated collection to::

    {
        "data": [...],
        "links": {"first": ..., "last": ..., "prev": ..., "next": ...},
        "meta": {"current_page": ..., "from": ..., "last_page": ..., "path": ...,
                 "per_page": ..., "to": ..., "total": ...},
    }

Whatever the resource returns from ``with_()`` and the data given to ``additional()`` are
merged recursively into the envelope.
"""
import base64
import collections.abc
import dataclasses
import datetime
import decimal
import json
import typing

from .utils.data import merge_recursive

if typing.TYPE_CHECKING:
    from .collection import CollectionResource  # noqa: F401
    from .resource import Resource  # noqa: F401


def _encode_datetime(value: typing.Any) -> str:
    return typing.cast(datetime.date, value).isoformat()


def _encode_decimal(value: typing.Any) -> str:
    return str(value)


def _encode_bytes(value: typing.Any) -> str:
    return base64.b64encode(value).decode("ascii")


def _encode_iterable(value: typing.Any) -> typing.List[typing.Any]:
    return list(value)


_encoders: typing.Dict[type, typing.Callable[[typing.Any], typing.Any]] = {
    datetime.datetime: _encode_datetime,
    datetime.date: _encode_datetime,
    datetime.time: _encode_datetime,
    decimal.Decimal: _encode_decimal,
    bytes: _encode_bytes,
    tuple: _encode_iterable,
    set: _encode_iterable,
    frozenset: _encode_iterable,
}


def encode_value(value: typing.Any) -> typing.Any:
    # fast pass
    encoder = _encoders.get(type(value))
    if encoder is not None:
        return encoder(value)

    for type_, encoder in _encoders.items():
        if isinstance(value, type_):
            return encoder(value)

    raise TypeError(f"unsupported type {value!r}")


@dataclasses.dataclass
class JSONResponse:
    payload: typing.Any
    status_code: int = 200
    headers: typing.Dict[str, str] = dataclasses.field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )

    def json(self, **kwargs: typing.Any) -> str:
        return json.dumps(self.payload, default=encode_value, **kwargs)


Envelope = typing.Union["Resource", "CollectionResource"]


class ResourceResponse:
    resource: Envelope

    def wrapper(self) -> typing.Optional[str]:
        """
        Returns the key the data is wrapped in.  Collections use the collection wrap key of
        the resource type they collect.
        """
        collects = getattr(self.resource, "collects", None)
        if collects is not None:
            return collects.collection_wrapper()
        return type(self.resource).wrapper()  # type: ignore

    def _is_wrapped(self, data: typing.Any, wrapper: typing.Optional[str]) -> bool:
        return (
            wrapper is not None
            and isinstance(data, collections.abc.Mapping)
            and wrapper in data
        )

    def wrap(
        self,
        data: typing.Any,
        with_: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        additional: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    ) -> typing.Any:
        with_ = with_ or {}
        additional = additional or {}
        wrapper = self.wrapper()

        if wrapper and not self._is_wrapped(data, wrapper):
            data = {wrapper: data}
        elif (with_ or additional) and not self._is_wrapped(data, wrapper):
            data = {wrapper or "data": data}

        if not isinstance(data, collections.abc.Mapping):
            return data
        return merge_recursive(data, with_, additional)

    def calculate_status(self) -> int:
        entity = getattr(self.resource, "resource", None)
        return 201 if getattr(entity, "was_recently_created", False) is True else 200

    def payload(self, request: typing.Any) -> typing.Any:
        return self.wrap(
            self.resource.resolve(request),
            self.resource.with_(request),
            self.resource.additional_data,
        )

    def to_response(self, request: typing.Any = None) -> JSONResponse:
        response = JSONResponse(payload=self.payload(request), status_code=self.calculate_status())
        self.resource.with_response(request, response)
        return response

    def __init__(self, resource: Envelope):
        self.resource = resource


class PaginatedResourceResponse(ResourceResponse):
    resource: "CollectionResource"

    _link_keys: typing.ClassVar[typing.Mapping[str, str]] = {
        "first": "first_page_url",
        "last": "last_page_url",
        "prev": "prev_page_url",
        "next": "next_page_url",
    }

    def pagination_links(self, paginated: typing.Mapping[str, typing.Any]) -> typing.Dict[str, typing.Any]:
        return {k: paginated.get(v) for k, v in self._link_keys.items()}

    def meta(self, paginated: typing.Mapping[str, typing.Any]) -> typing.Dict[str, typing.Any]:
        excluded = set(self._link_keys.values()) | {"data"}
        return {k: v for k, v in paginated.items() if k not in excluded}

    def pagination_information(self, request: typing.Any = None) -> typing.Dict[str, typing.Any]:
        paginated = self.resource.resource.to_dict()
        return {
            "links": self.pagination_links(paginated),
            "meta": self.meta(paginated),
        }

    def payload(self, request: typing.Any) -> typing.Any:
        return self.wrap(
            self.resource.resolve(request),
            merge_recursive(
                self.pagination_information(request),
                self.resource.with_(request),
                self.resource.additional_data,
            ),
        )

    def to_paginator(self, request: typing.Any = None) -> typing.Dict[str, typing.Any]:
        return typing.cast(typing.Dict[str, typing.Any], self.payload(request))
