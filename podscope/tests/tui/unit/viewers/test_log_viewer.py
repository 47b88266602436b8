"""Tests for LogViewer buffer, scrolling and search."""

from __future__ import annotations

import pytest

from podscope.constants.defaults import TAIL_LINES_DEFAULT
from podscope.viewers.log_viewer import LogViewer


@pytest.fixture
def viewer() -> LogViewer:
    viewer = LogViewer(max_lines=5, page_size=2)
    viewer.set_target(pod="web-7", namespace="default", containers=["web", "sidecar"])
    return viewer


class TestTarget:
    """Tests for target selection."""

    def test_first_container_is_default(self, viewer: LogViewer) -> None:
        assert viewer.container == "web"
        assert viewer.source_key == "default/web-7/web"
        assert viewer.has_multiple_containers
        assert viewer.tail_lines == TAIL_LINES_DEFAULT

    def test_new_target_resets_follow_and_lines(self, viewer: LogViewer) -> None:
        viewer.toggle_following()
        viewer.set_lines(["a"])
        viewer.set_target(pod="api-1", container="api")
        assert not viewer.following
        assert viewer.lines == []
        assert viewer.source_key == "api-1/api"


class TestBuffer:
    """Tests for the bounded buffer."""

    def test_set_lines_keeps_newest(self, viewer: LogViewer) -> None:
        viewer.set_lines([f"{index}\n" for index in range(8)])
        assert viewer.lines == ["3", "4", "5", "6", "7"]

    def test_append_drops_oldest(self, viewer: LogViewer) -> None:
        viewer.set_lines(["a", "b", "c", "d", "e"])
        viewer.append("f")
        assert viewer.lines == ["b", "c", "d", "e", "f"]

    def test_append_keeps_scrolled_position(self, viewer: LogViewer) -> None:
        viewer.set_lines(["a", "b", "c"])
        viewer.handle_key("up")
        viewer.append("d")
        assert viewer.offset == 2
        _, lines = viewer.window(2)
        assert lines == ["a", "b"]

    def test_window_at_bottom(self, viewer: LogViewer) -> None:
        viewer.set_lines(["a", "b", "c"])
        start, lines = viewer.window(2)
        assert (start, lines) == (1, ["b", "c"])


class TestScrolling:
    """Tests for scroll keys."""

    def test_scroll_is_clamped(self, viewer: LogViewer) -> None:
        viewer.set_lines(["a", "b", "c"])
        viewer.handle_key("g")
        assert viewer.offset == 2
        viewer.handle_key("pageup")
        assert viewer.offset == 2
        viewer.handle_key("G")
        assert viewer.offset == 0
        viewer.handle_key("down")
        assert viewer.offset == 0

    def test_following_returns_to_bottom(self, viewer: LogViewer) -> None:
        viewer.set_lines(["a", "b", "c"])
        viewer.handle_key("k")
        assert viewer.toggle_following()
        assert viewer.offset == 0

    def test_unknown_key(self, viewer: LogViewer) -> None:
        assert not viewer.handle_key("x")


class TestSearch:
    """Tests for log search."""

    def test_matches_are_case_insensitive(self, viewer: LogViewer) -> None:
        viewer.set_lines(["ERROR one", "ok", "error two"])
        assert viewer.set_search("error") == 2
        assert viewer.matches == [0, 2]
        assert viewer.current_match_line == 2

    def test_next_and_prev_wrap(self, viewer: LogViewer) -> None:
        viewer.set_lines(["x1", "y", "x2", "z"])
        viewer.set_search("x")
        viewer.next_match()
        assert viewer.current_match_line == 0
        assert viewer.offset == 3
        viewer.prev_match()
        assert viewer.current_match_line == 2
        assert viewer.offset == 1

    def test_no_matches(self, viewer: LogViewer) -> None:
        viewer.set_lines(["a"])
        assert viewer.set_search("zzz") == 0
        assert not viewer.next_match()
        assert viewer.current_match_line is None

    def test_appended_lines_are_searched(self, viewer: LogViewer) -> None:
        viewer.set_lines(["a"])
        viewer.set_search("hit")
        viewer.append("a hit")
        assert viewer.matches == [1]

    def test_clear_search(self, viewer: LogViewer) -> None:
        viewer.set_lines(["hit"])
        viewer.set_search("hit")
        viewer.clear_search()
        assert viewer.search_query == ""
        assert viewer.matches == []
