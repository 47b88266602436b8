"""Scrollback, follow state and search for a single log source."""

from __future__ import annotations

from podscope.constants.defaults import TAIL_LINES_DEFAULT
from podscope.constants.values import MAX_LOG_LINES
from podscope.keyboard.keys import KEYS_BOTTOM, KEYS_DOWN, KEYS_PAGE_DOWN, KEYS_PAGE_UP, KEYS_TOP, KEYS_UP


class LogViewer:
    """Log buffer for the pod and remote log views.

    ``offset`` counts lines scrolled up from the bottom; 0 means the view
    sticks to the newest line. Following starts off on every new target;
    the history tail is shown first and ``f`` starts the live stream.
    """

    def __init__(self, max_lines: int = MAX_LOG_LINES, page_size: int = 20) -> None:
        self.max_lines = max_lines
        self.page_size = page_size
        self.namespace = ""
        self.pod = ""
        self.container = ""
        self.containers: list[str] = []
        self.tail_lines = TAIL_LINES_DEFAULT
        self.timestamps = False
        self.following = False
        self.lines: list[str] = []
        self.offset = 0
        self.search_query = ""
        self.matches: list[int] = []
        self.match_index = -1

    def set_target(
        self,
        *,
        pod: str,
        namespace: str = "",
        container: str = "",
        containers: list[str] | None = None,
    ) -> None:
        self.pod = pod
        self.namespace = namespace
        self.containers = list(containers or [])
        if container:
            self.container = container
        else:
            self.container = self.containers[0] if self.containers else ""
        self.following = False
        self.clear_search()
        self.clear()

    @property
    def source_key(self) -> str:
        parts = [part for part in (self.namespace, self.pod, self.container) if part]
        return "/".join(parts)

    @property
    def has_multiple_containers(self) -> bool:
        return len(self.containers) > 1

    # ------------------------------------------------------------------
    # Buffer
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self.lines = []
        self.offset = 0
        self.matches = []
        self.match_index = -1

    def set_lines(self, lines: list[str]) -> None:
        self.lines = [line.rstrip("\n") for line in lines][-self.max_lines :]
        self.offset = 0
        self._recompute_matches()

    def append(self, line: str) -> None:
        self.lines.append(line.rstrip("\n"))
        overflow = len(self.lines) - self.max_lines
        if overflow > 0:
            del self.lines[:overflow]
        if self.search_query:
            self._recompute_matches()
        if self.offset:
            self.offset = min(self.offset + 1, max(len(self.lines) - 1, 0))

    def toggle_following(self) -> bool:
        self.following = not self.following
        if self.following:
            self.offset = 0
        return self.following

    def toggle_timestamps(self) -> bool:
        self.timestamps = not self.timestamps
        return self.timestamps

    # ------------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        last = max(len(self.lines) - 1, 0)
        if key in KEYS_UP:
            self.offset = min(self.offset + 1, last)
        elif key in KEYS_DOWN:
            self.offset = max(self.offset - 1, 0)
        elif key in KEYS_PAGE_UP:
            self.offset = min(self.offset + self.page_size, last)
        elif key in KEYS_PAGE_DOWN:
            self.offset = max(self.offset - self.page_size, 0)
        elif key in KEYS_TOP:
            self.offset = last
        elif key in KEYS_BOTTOM:
            self.offset = 0
        else:
            return False
        return True

    def window(self, height: int) -> tuple[int, list[str]]:
        """Return the index of the first visible line and the visible lines."""
        end = len(self.lines) - self.offset
        start = max(end - height, 0)
        return start, self.lines[start:end]

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def set_search(self, query: str) -> int:
        """Apply a search query and jump to the last match; returns the match count."""
        self.search_query = query
        self._recompute_matches()
        if self.matches:
            self.match_index = len(self.matches) - 1
            self._scroll_to_match()
        return len(self.matches)

    def clear_search(self) -> None:
        self.search_query = ""
        self.matches = []
        self.match_index = -1

    def next_match(self) -> bool:
        if not self.matches:
            return False
        self.match_index = (self.match_index + 1) % len(self.matches)
        self._scroll_to_match()
        return True

    def prev_match(self) -> bool:
        if not self.matches:
            return False
        self.match_index = (self.match_index - 1) % len(self.matches)
        self._scroll_to_match()
        return True

    @property
    def current_match_line(self) -> int | None:
        if 0 <= self.match_index < len(self.matches):
            return self.matches[self.match_index]
        return None

    def _recompute_matches(self) -> None:
        if not self.search_query:
            self.matches = []
            self.match_index = -1
            return
        needle = self.search_query.lower()
        self.matches = [index for index, line in enumerate(self.lines) if needle in line.lower()]
        if self.match_index >= len(self.matches):
            self.match_index = len(self.matches) - 1

    def _scroll_to_match(self) -> None:
        line = self.current_match_line
        if line is None:
            return
        self.offset = max(len(self.lines) - 1 - line, 0)
