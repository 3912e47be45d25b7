import datetime
import decimal
import json

import pytest

from .testing import make_post, plain_inspector


class TestJSONResponse:
    def test_json(self):
        from ..response import JSONResponse

        response = JSONResponse(
            {
                "at": datetime.datetime(2020, 1, 2, 3, 4, 5),
                "on": datetime.date(2020, 1, 2),
                "price": decimal.Decimal("1.50"),
                "raw": b"\x00\x01",
                "tags": ("a", "b"),
            }
        )
        assert response.status_code == 200
        assert response.headers == {"Content-Type": "application/json"}
        assert json.loads(response.json()) == {
            "at": "2020-01-02T03:04:05",
            "on": "2020-01-02",
            "price": "1.50",
            "raw": "AAE=",
            "tags": ["a", "b"],
        }

    def test_unsupported(self):
        from ..response import JSONResponse

        with pytest.raises(TypeError):
            JSONResponse({"x": object()}).json()


class TestResourceResponse:
    @pytest.fixture(autouse=True)
    def reset(self):
        from ..wrapping import registry

        plain_inspector.reset()
        registry.reset()
        yield
        plain_inspector.reset()
        registry.reset()

    @pytest.fixture
    def post(self):
        return make_post()

    @pytest.fixture
    def attributes(self):
        return {"id": 1, "title": "post1", "published_at": "2020-01-02"}

    def test_default_wrap(self, post, attributes):
        from .testing import PostResource

        response = PostResource(post).to_response()
        assert response.status_code == 200
        assert response.payload == {"data": attributes}

    def test_without_wrapping(self, post, attributes):
        from .testing import PostResource

        PostResource.without_wrapping()
        assert PostResource(post).to_response().payload == attributes
        assert PostResource(post).additional({"version": 1}).to_response().payload == {
            "data": attributes,
            "version": 1,
        }

    def test_custom_wrap(self, post, attributes):
        from .testing import PostResource

        class WrappedPostResource(PostResource):
            class Meta:
                wrap = "post"
                wrap_collection = "posts"

        assert WrappedPostResource(post).to_response().payload == {"post": attributes}
        assert WrappedPostResource.collection([post]).to_response().payload == {"posts": [attributes]}

    def test_collection_falls_back_to_single_wrap(self, post, attributes):
        from .testing import PostResource

        class WrappedPostResource(PostResource):
            class Meta:
                wrap = "post"

        assert WrappedPostResource.collection([post]).to_response().payload == {"post": [attributes]}

    def test_already_wrapped(self, post):
        from .testing import PlainResource

        class SelfWrappingResource(PlainResource):
            def to_array(self, request):
                return {"data": {"id": self.resource.id}}

        assert SelfWrappingResource(post).to_response().payload == {"data": {"id": 1}}

    def test_with_and_additional(self, post, attributes):
        from .testing import PostResource

        class VersionedPostResource(PostResource):
            def with_(self, request):
                return {"meta": {"version": 1}}

        response = VersionedPostResource(post).additional({"meta": {"extra": True}}).to_response()
        assert response.payload == {"data": attributes, "meta": {"version": 1, "extra": True}}

    def test_with_response(self, post):
        from .testing import PostResource

        class HeaderPostResource(PostResource):
            def with_response(self, request, response):
                response.headers["X-Request"] = request

        response = HeaderPostResource(post).to_response("req")
        assert response.headers["X-Request"] == "req"

    def test_recently_created(self, post):
        from .testing import PostResource

        post.was_recently_created = True
        assert PostResource(post).to_response().status_code == 201

    def test_null_resource(self):
        from .testing import PostResource

        assert PostResource(None).to_response().payload == {"data": None}

    def test_paginated(self, attributes):
        from ..pagination import LengthAwarePaginator
        from .testing import PostResource

        paginator = LengthAwarePaginator([make_post()], total=3, per_page=1, current_page=2, path="/posts")
        response = PostResource.collection(paginator).additional({"meta": {"extra": True}}).to_response()
        assert response.payload == {
            "data": [attributes],
            "links": {
                "first": "/posts?page=1",
                "last": "/posts?page=3",
                "prev": "/posts?page=1",
                "next": "/posts?page=3",
            },
            "meta": {
                "current_page": 2,
                "from": 2,
                "last_page": 3,
                "path": "/posts",
                "per_page": 1,
                "to": 2,
                "total": 3,
                "extra": True,
            },
        }

    def test_paginated_without_wrapping(self, attributes):
        from ..pagination import LengthAwarePaginator
        from .testing import PostResource

        PostResource.without_wrapping()
        paginator = LengthAwarePaginator([make_post()], total=1, per_page=10)
        payload = PostResource.collection(paginator).to_paginator()
        assert payload["data"] == [attributes]
        assert set(payload) == {"data", "links", "meta"}
