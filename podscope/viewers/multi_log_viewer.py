"""Aggregated log buffer for several pods at once."""

from __future__ import annotations

from dataclasses import dataclass

from podscope.constants.values import MAX_LOG_LINES, MULTI_LOG_HEADER_FORMAT
from podscope.keyboard.keys import KEYS_BOTTOM, KEYS_DOWN, KEYS_PAGE_DOWN, KEYS_PAGE_UP, KEYS_TOP, KEYS_UP


@dataclass(frozen=True)
class LogEntry:
    source_key: str
    text: str
    header: bool = False


def _header(source_key: str) -> LogEntry:
    return LogEntry(source_key, MULTI_LOG_HEADER_FORMAT.format(source=source_key), header=True)


class MultiLogViewer:
    """Lines from several sources in arrival order.

    A ``==> source <==`` header is inserted whenever the appended line comes
    from a different source than the previously appended one, including the
    very first line. Headers mark append order, not a time-ordered merge.
    Trimming to ``max_lines`` keeps a header above the oldest remaining line.
    """

    def __init__(self, max_lines: int = MAX_LOG_LINES, page_size: int = 20) -> None:
        self.max_lines = max_lines
        self.page_size = page_size
        self.pods: list[str] = []
        self.entries: list[LogEntry] = []
        self.following = True
        self.offset = 0
        self.header_count = 0
        self.line_count = 0
        self._last_source: str | None = None

    def set_pods(self, pods: list[str]) -> None:
        self.pods = list(pods)
        self.following = True
        self.clear()

    def clear(self) -> None:
        self.entries = []
        self.offset = 0
        self.header_count = 0
        self.line_count = 0
        self._last_source = None

    def append(self, source_key: str, line: str) -> None:
        text = line.rstrip("\n")
        if not text:
            return
        if source_key != self._last_source:
            self.entries.append(_header(source_key))
            self.header_count += 1
            self._last_source = source_key
        self.entries.append(LogEntry(source_key, text))
        self.line_count += 1
        overflow = len(self.entries) - self.max_lines
        if overflow > 0:
            del self.entries[:overflow]
            self._restore_leading_header()
        if self.offset:
            self.offset = min(self.offset + 1, len(self.entries) - 1)

    def _restore_leading_header(self) -> None:
        """Keep a header at the top of the buffer once trimming has cut it off."""
        first = self.entries[0]
        if first.header:
            return
        if len(self.entries) > 1 and self.entries[1].header:
            del self.entries[0]
        else:
            self.entries[0] = _header(first.source_key)

    def toggle_following(self) -> bool:
        self.following = not self.following
        if self.following:
            self.offset = 0
        return self.following

    def handle_key(self, key: str) -> bool:
        last = max(len(self.entries) - 1, 0)
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

    def window(self, height: int) -> list[LogEntry]:
        end = len(self.entries) - self.offset
        return self.entries[max(end - height, 0) : end]
