import pytest


class TestHandleMeta:
    def test_defaults(self):
        from ..declarative import Meta, handle_meta
        from ..utils import UNSPECIFIED
        from ..utils.formatting import camel

        class M:
            pass

        meta = handle_meta(M)
        assert meta == Meta()
        assert meta.wrap is UNSPECIFIED
        assert meta.relation_naming is camel
        assert meta.inspector is None

    def test_inherits_and_merges_casts(self):
        from ..declarative import handle_meta
        from ..utils.formatting import snake

        class Base:
            wrap = "item"
            casts = {"a": "date:%Y"}

        class Derived:
            casts = {"b": "datetime:%H"}
            relation_naming = "snake"

        base = handle_meta(Base)
        meta = handle_meta(Derived, base)
        assert meta.wrap == "item"
        assert meta.casts == {"a": "date:%Y", "b": "datetime:%H"}
        assert meta.relation_naming is snake

    @pytest.mark.parametrize(
        "attrs",
        [
            {"unknown": 1},
            {"wrap": 1},
            {"casts": ["a"]},
            {"casts": {"a": 1}},
            {"relation_naming": "kebab"},
            {"relation_naming": 1},
            {"inspector": object()},
        ],
    )
    def test_invalid(self, attrs):
        from ..declarative import handle_meta
        from ..exceptions import InvalidDeclarationError

        M = type("M", (), attrs)
        with pytest.raises(InvalidDeclarationError):
            handle_meta(M)

    def test_relation_naming_callable(self):
        from ..declarative import handle_meta

        class M:
            relation_naming = str.upper

        assert handle_meta(M).relation_naming("abc") == "ABC"


class TestDeclare:
    def test_resource_meta(self):
        from ..resource import Resource
        from .testing import PlainResource, plain_inspector

        class FooResource(PlainResource):
            class Meta:
                preserve_keys = True
                relation_naming = "none"

        assert FooResource._meta.inspector is plain_inspector
        assert FooResource._meta.preserve_keys is True
        assert FooResource.canonicalize_relation_name("user_profile") == "user_profile"
        assert PlainResource.canonicalize_relation_name("user_profile") == "userProfile"
        assert PlainResource.canonicalize_relation_path("post.user_profile") == "post.userProfile"
        assert FooResource.canonicalize_relation_path("post.user-profile") == "post.user-profile"
        assert Resource._meta.inspector is None

    def test_no_inspector(self):
        from ..exceptions import InvalidDeclarationError
        from ..resource import Resource

        class FooResource(Resource):
            pass

        with pytest.raises(InvalidDeclarationError):
            FooResource.get_inspector()
