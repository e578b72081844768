"""Tests for selection and viewport helper functions."""

from mpdox.ui.helpers.scrolling import calculate_scroll_offset, clamp_selection, half_viewport


class TestClampSelection:
    """Test selection clamping."""

    def test_inside_range_unchanged(self):
        assert clamp_selection(3, 10) == 3

    def test_clamps_both_ends(self):
        assert clamp_selection(15, 10) == 9
        assert clamp_selection(-5, 10) == 0

    def test_empty_list_has_no_selection(self):
        """Only an empty list has no selection."""
        assert clamp_selection(0, 0) is None


class TestScrollOffset:
    """Test viewport offset computation."""

    def test_no_scroll_when_visible(self):
        """Selection already in view keeps the offset."""
        assert calculate_scroll_offset(5, 0, 10, 20) == 0
        assert calculate_scroll_offset(12, 8, 10, 20) == 8

    def test_scroll_down_to_selection(self):
        """Selection below the viewport lands on its last row."""
        assert calculate_scroll_offset(15, 0, 10, 20) == 6

    def test_scroll_up_to_selection(self):
        """Selection above the viewport lands on its first row."""
        assert calculate_scroll_offset(2, 10, 10, 20) == 2

    def test_never_past_end(self):
        """A stale offset past the end is pulled back."""
        assert calculate_scroll_offset(19, 18, 10, 20) == 10

    def test_small_lists(self):
        """Lists shorter than the viewport never scroll."""
        assert calculate_scroll_offset(2, 1, 10, 3) == 0

    def test_empty_list(self):
        assert calculate_scroll_offset(None, 4, 10, 0) == 0

    def test_zero_height_viewport(self):
        """A collapsed viewport still follows the selection."""
        assert calculate_scroll_offset(7, 0, 0, 20) == 7


class TestHalfViewport:
    """Test half-page step size."""

    def test_half_of_height(self):
        assert half_viewport(20) == 10
        assert half_viewport(5) == 2

    def test_minimum_step(self):
        assert half_viewport(1) == 1
        assert half_viewport(0) == 1
