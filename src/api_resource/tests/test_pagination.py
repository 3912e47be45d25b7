import pytest


class TestLengthAwarePaginator:
    def test_to_dict(self):
        from ..pagination import LengthAwarePaginator

        p = LengthAwarePaginator(["d", "e", "f"], total=7, per_page=3, current_page=2, path="/posts")
        assert p.to_dict() == {
            "current_page": 2,
            "first_page_url": "/posts?page=1",
            "from": 4,
            "last_page": 3,
            "last_page_url": "/posts?page=3",
            "next_page_url": "/posts?page=3",
            "path": "/posts",
            "per_page": 3,
            "prev_page_url": "/posts?page=1",
            "to": 6,
            "total": 7,
        }
        assert list(p) == ["d", "e", "f"]
        assert len(p) == 3

    def test_empty(self):
        from ..pagination import LengthAwarePaginator

        p = LengthAwarePaginator([], total=0, per_page=10)
        d = p.to_dict()
        assert d["from"] is None
        assert d["to"] is None
        assert d["last_page"] == 1
        assert d["next_page_url"] is None
        assert d["prev_page_url"] is None

    def test_query(self):
        from ..pagination import LengthAwarePaginator

        p = LengthAwarePaginator([1], total=30, per_page=1, query={"load": "author"})
        assert p.url(2) == "/?load=author&page=2"
        assert p.url(0) == "/?load=author&page=1"

    def test_invalid_per_page(self):
        from ..pagination import LengthAwarePaginator

        with pytest.raises(ValueError):
            LengthAwarePaginator([], total=0, per_page=0)
