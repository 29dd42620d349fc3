"""Tests for CyclicSelectionList wraparound navigation."""

import pytest

from probedash.selection import CyclicSelectionList


class TestNavigation:
    """next()/previous() on populated lists."""

    def test_next_without_selection_selects_first(self):
        lst = CyclicSelectionList(["a", "b", "c"])
        lst.next()
        assert lst.selected == 0

    def test_previous_without_selection_selects_first(self):
        lst = CyclicSelectionList(["a", "b", "c"])
        lst.previous()
        assert lst.selected == 0

    def test_next_wraps_to_start(self):
        lst = CyclicSelectionList(["a", "b", "c"])
        lst.replace(["a", "b", "c"])
        lst.next()
        lst.next()
        assert lst.selected == 2
        lst.next()
        assert lst.selected == 0

    def test_previous_wraps_to_end(self):
        lst = CyclicSelectionList(["a", "b", "c"])
        lst.replace(["a", "b", "c"])
        lst.previous()
        assert lst.selected == 2
        assert lst.selected_item == "c"

    @pytest.mark.parametrize("length", [1, 2, 5, 17])
    @pytest.mark.parametrize("start", [0, 1, 3])
    def test_full_cycle_returns_to_start(self, length, start):
        lst = CyclicSelectionList(range(length))
        lst.next()
        for _ in range(start % length):
            lst.next()
        origin = lst.selected

        for _ in range(length):
            lst.next()
        assert lst.selected == origin

        for _ in range(length):
            lst.previous()
        assert lst.selected == origin


class TestEmptyList:
    """Navigation on an empty list is a no-op."""

    def test_next_on_empty_keeps_no_selection(self):
        lst = CyclicSelectionList()
        lst.next()
        assert lst.selected is None
        assert lst.selected_item is None

    def test_previous_on_empty_keeps_no_selection(self):
        lst = CyclicSelectionList()
        lst.previous()
        lst.previous()
        assert lst.selected is None


class TestReplace:
    """replace() swaps items and resets the selection."""

    def test_replace_selects_first_item(self):
        lst = CyclicSelectionList(["x"])
        lst.replace(["a", "b"])
        assert lst.items == ["a", "b"]
        assert lst.selected == 0

    def test_replace_resets_previous_selection(self):
        lst = CyclicSelectionList()
        lst.replace(["a", "b", "c"])
        lst.next()
        lst.next()
        lst.replace(["d", "e", "f"])
        assert lst.selected == 0

    def test_replace_with_empty_clears_selection(self):
        lst = CyclicSelectionList()
        lst.replace(["a", "b", "c"])
        lst.previous()
        lst.replace([])
        assert lst.selected is None
        assert len(lst) == 0

    def test_selection_never_out_of_bounds_after_shrink(self):
        lst = CyclicSelectionList()
        lst.replace(list("abcdef"))
        lst.previous()
        assert lst.selected == 5
        lst.replace(["a"])
        assert lst.selected == 0
        lst.next()
        assert lst.selected == 0

    def test_items_is_a_copy(self):
        lst = CyclicSelectionList(["a"])
        lst.items.append("b")
        assert len(lst) == 1
