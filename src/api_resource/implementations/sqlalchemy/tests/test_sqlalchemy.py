import pytest
import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from .models import Base, Comment, Post, PostResource, Profile, User, populate


class TestSQLAInspector:
    @pytest.fixture
    def engine(self):
        engine = sa.create_engine("sqlite://")
        Base.metadata.create_all(engine)
        with orm.Session(engine) as session:
            populate(session)
        return engine

    @pytest.fixture
    def session(self, engine):
        session = orm.Session(engine)
        yield session
        session.close()

    @pytest.fixture
    def posts(self, session):
        return session.execute(sa.select(Post).order_by(Post.id)).scalars().all()

    @pytest.fixture
    def inspector(self):
        from ..core import SQLAInspector

        return SQLAInspector()

    def test_relation_kind(self, inspector):
        from ....interfaces import RelationKind

        assert inspector.relation_kind(Post(), "author") is RelationKind.BELONGS_TO
        assert inspector.relation_kind(Post(), "comments") is RelationKind.HAS_MANY
        assert inspector.relation_kind(Post(), "tags") is RelationKind.BELONGS_TO_MANY
        assert inspector.relation_kind(Post(), "featured_tag") is RelationKind.BELONGS_TO
        assert inspector.relation_kind(User(), "profile") is RelationKind.HAS_ONE
        assert inspector.relation_kind(Profile(), "user") is RelationKind.BELONGS_TO

    def test_unknown_relation(self, inspector):
        from ....exceptions import MissingRelationError

        with pytest.raises(MissingRelationError):
            inspector.relation_kind(Post(), "nope")
        with pytest.raises(MissingRelationError):
            inspector.is_relation_loaded(Post(), "title")

    def test_attributes(self, inspector, posts):
        import datetime

        from ....exceptions import MissingAttributeError

        post = posts[0]
        assert inspector.fetch_attributes(post) == {
            "id": 1,
            "title": "post1",
            "published_at": datetime.datetime(2020, 1, 1, 12, 0, 0),
            "author_id": 1,
            "featured_tag_id": 1,
        }
        assert inspector.fetch_attribute(post, "title") == "post1"
        with pytest.raises(MissingAttributeError):
            inspector.fetch_attribute(post, "nope")
        with pytest.raises(MissingAttributeError):
            inspector.fetch_attribute(post, "author")

    def test_casts(self, inspector, posts):
        assert inspector.get_casts(posts[0]) == {"published_at": "datetime:%Y-%m-%d"}
        assert inspector.get_casts(Comment()) == {}

    def test_load_missing(self, inspector, posts):
        assert not any(inspector.is_relation_loaded(p, "comments") for p in posts)
        inspector.load_missing(posts, ["comments.author", "author"])
        for post in posts:
            assert inspector.is_relation_loaded(post, "comments")
            assert inspector.is_relation_loaded(post, "author")
            assert not inspector.is_relation_loaded(post, "tags")
            for comment in post.comments:
                assert inspector.is_relation_loaded(comment, "author")
        assert [c.author.name for c in posts[0].comments] == ["bob", "alice"]

    def test_load_missing_keeps_loaded_relations(self, inspector, posts):
        post = posts[0]
        comments = post.comments
        inspector.load_missing([post], ["comments"])
        assert post.comments is comments

    def test_load_missing_unknown_relation(self, inspector, posts):
        from ....exceptions import MissingRelationError

        with pytest.raises(MissingRelationError):
            inspector.load_missing(posts, ["comments.nope"])

    def test_fetch_related(self, inspector, posts):
        assert inspector.fetch_related(posts[0], "author").name == "alice"
        assert [t.name for t in inspector.fetch_related(posts[0], "tags")] == ["python", "sql"]


class TestSQLAResource:
    @pytest.fixture
    def session(self):
        engine = sa.create_engine("sqlite://")
        Base.metadata.create_all(engine)
        with orm.Session(engine) as session:
            populate(session)
        session = orm.Session(engine)
        yield session
        session.close()

    def test_build(self, session):
        posts = session.execute(sa.select(Post).order_by(Post.id)).scalars().all()
        result = PostResource.build(posts).with_relations("author", "comments.author").to_array()
        assert result[0] == {
            "id": 1,
            "title": "post1",
            "published_at": "2020-01-01",
            "author": {"id": 1, "name": "alice"},
            "comments": [
                {"id": 10, "body": "first", "author": {"id": 2, "name": "bob"}},
                {"id": 11, "body": "second", "author": {"id": 1, "name": "alice"}},
            ],
        }
        assert result[1]["published_at"] == "2020-01-02"

    def test_optional_relations(self, session):
        from ....request import MappingRequest

        post = session.get(Post, 1)
        result = (
            PostResource.build(post)
            .with_request(MappingRequest(load="tags,comments"))
            .with_optional_relations("tags")
            .to_response()
        )
        assert result.payload == {
            "data": {
                "id": 1,
                "title": "post1",
                "published_at": "2020-01-01",
                "tags": [{"name": "python"}, {"name": "sql"}],
            }
        }

    def test_unloaded_relation_is_not_serialized(self, session):
        post = session.get(Post, 1)
        resource = PostResource.build(post).prepare().get_resource()
        resource.set_relations([["author"]])
        assert "author" not in resource.resolve()

    def test_multi_word_relation(self, session):
        posts = session.execute(sa.select(Post).order_by(Post.id)).scalars().all()
        result = PostResource.build(posts).with_relations("featured_tag").to_array()
        assert [r["featured_tag"] for r in result] == [{"name": "python"}, {"name": "python"}]

    @pytest.mark.parametrize("load", ["featured_tag", "featuredTag", "featured-tag,author"])
    def test_optional_multi_word_relation(self, session, load):
        from ....request import MappingRequest

        post = session.get(Post, 1)
        b = (
            PostResource.build(post)
            .with_request(MappingRequest(load=load))
            .with_optional_relations("featured_tag", "comments")
        )
        assert b.relations == ["featured_tag"]
        assert b.to_response().payload == {
            "data": {
                "id": 1,
                "title": "post1",
                "published_at": "2020-01-01",
                "featured_tag": {"name": "python"},
            }
        }
