# tests/core/test_task_level.py
import pytest

from causelog.core.task_level import TaskLevel


class TestTaskLevelParsing:
    def test_from_string_converts_components_to_numbers(self):
        assert TaskLevel.from_string("1/2/3") == TaskLevel((1, 2, 3))

    def test_from_string_skips_empty_components(self):
        assert TaskLevel.from_string("//1/2/3//") == TaskLevel((1, 2, 3))

    def test_from_string_of_root(self):
        assert TaskLevel.from_string("/") == TaskLevel(())

    def test_to_string(self):
        assert TaskLevel((1, 2, 3)).to_string() == "/1/2/3"
        assert str(TaskLevel((4,))) == "/4"

    @pytest.mark.parametrize("level", [(1,), (1, 2, 3), (7, 1, 12, 1)])
    def test_round_trip(self, level):
        """Parsing the string form of a non-empty level gives the level back."""
        original = TaskLevel(level)
        assert TaskLevel.from_string(original.to_string()) == original


class TestTaskLevelNavigation:
    def test_next_sibling(self):
        assert TaskLevel((1,)).next_sibling() == TaskLevel((2,))
        assert TaskLevel((1, 2, 3)).next_sibling() == TaskLevel((1, 2, 4))

    def test_child(self):
        assert TaskLevel((1,)).child() == TaskLevel((1, 1))
        assert TaskLevel((1, 2, 3)).child() == TaskLevel((1, 2, 3, 1))
        assert TaskLevel(()).child() == TaskLevel((1,))

    def test_parent(self):
        assert TaskLevel((1, 2, 3)).parent() == TaskLevel((1, 2))

    def test_root_has_no_parent(self):
        assert TaskLevel(()).parent() is None

    @pytest.mark.parametrize("level", [(), (1,), (3, 4, 5)])
    def test_child_and_sibling_parents(self, level):
        lvl = TaskLevel(level)
        assert lvl.child().parent() == lvl
        if level:
            assert lvl.next_sibling().parent() == lvl.parent()

    def test_is_sibling_of(self):
        assert TaskLevel((1, 2)).is_sibling_of(TaskLevel((1, 3)))
        assert not TaskLevel((1, 2)).is_sibling_of(TaskLevel((2, 2)))

    def test_levels_are_immutable_and_hashable(self):
        lvl = TaskLevel([1, 2])
        lvl.child()
        assert lvl.level == (1, 2)
        assert {lvl, TaskLevel((1, 2))} == {lvl}
        with pytest.raises(AttributeError):
            lvl.level = (3,)
