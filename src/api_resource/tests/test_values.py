import pytest


class TestMissing:
    def test_singleton(self):
        from ..values import MISSING, MissingValue, is_missing

        assert MissingValue() is MISSING
        assert not MISSING
        assert is_missing(MISSING)
        assert not is_missing(None)
        assert not is_missing(0)


class TestWhen:
    def test_when(self):
        from ..values import MISSING, when

        assert when(True, 1) == 1
        assert when(False, 1) is MISSING
        assert when(False, 1, 2) == 2
        assert when(1, lambda: "called") == "called"
        assert when(0, 1, lambda: "default") == "default"

    def test_merge_when(self):
        from ..values import MISSING, MergeValue, merge_when

        assert merge_when(False, {"a": 1}) is MISSING
        v = merge_when(True, lambda: {"a": 1})
        assert isinstance(v, MergeValue)
        assert v.data == {"a": 1}

    def test_merge_value_requires_mapping(self):
        from ..values import MergeValue

        with pytest.raises(TypeError):
            MergeValue(["a"])


class TestFilterData:
    def test_mapping(self):
        from ..values import MISSING, MergeValue, filter_data

        assert filter_data(
            {"a": 1, "b": MISSING, "c": None, "d": MergeValue({"e": 2, "f": MISSING})}
        ) == {"a": 1, "c": None, "e": 2}

    def test_fragments(self):
        from ..values import MISSING, MergeValue, filter_data

        assert filter_data(
            [
                MergeValue({"id": 1}),
                {"title": "t", "hidden": MISSING},
                MISSING,
                MergeValue({"nested": {"x": MISSING, "y": [1, MISSING, 2]}}),
            ]
        ) == {"id": 1, "title": "t", "nested": {"y": [1, 2]}}

    def test_unkeyed_value(self):
        from ..values import filter_data

        with pytest.raises(TypeError):
            filter_data([1])

    def test_resolvable(self):
        from ..values import Resolvable, filter_data

        class Fixed(Resolvable):
            def resolve(self, request=None):
                return {"request": request}

        assert filter_data({"a": Fixed(), "b": [Fixed()]}, "req") == {
            "a": {"request": "req"},
            "b": [{"request": "req"}],
        }
