"""Unit tests for timeout and streaming constants.

Tests cover:
- Timeout values and types
- Logical relationships between timeout magnitudes
- Log tail sizes used when opening and restarting streams
"""

from __future__ import annotations

from podscope.constants.defaults import REFRESH_INTERVAL_DEFAULT, TAIL_LINES_DEFAULT
from podscope.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_CHECK_TIMEOUT,
    KUBECTL_COMMAND_TIMEOUT,
    NOTIFICATION_TTL,
    REFRESH_INTERVAL,
    SSH_COMMAND_TIMEOUT,
    SSH_CONNECT_TIMEOUT,
)
from podscope.constants.values import (
    LOG_QUEUE_CAPACITY,
    MAX_LOG_LINES,
    MULTI_LOG_TAIL_LINES,
    RESTART_TAIL_LINES,
)

# =============================================================================
# Cluster timeouts
# =============================================================================


class TestClusterTimeouts:
    """Test kubectl request and process timeouts."""

    def test_request_timeout_format(self) -> None:
        assert CLUSTER_REQUEST_TIMEOUT == "30s"

    def test_command_timeout_exceeds_request_timeout(self) -> None:
        assert KUBECTL_COMMAND_TIMEOUT > int(CLUSTER_REQUEST_TIMEOUT.rstrip("s"))

    def test_check_timeout_is_shorter(self) -> None:
        assert 0 < KUBECTL_CHECK_TIMEOUT < KUBECTL_COMMAND_TIMEOUT


# =============================================================================
# Remote and timer intervals
# =============================================================================


class TestIntervals:
    """Test remote shell timeouts and timer intervals."""

    def test_ssh_timeouts(self) -> None:
        assert 0 < SSH_CONNECT_TIMEOUT <= SSH_COMMAND_TIMEOUT

    def test_refresh_interval(self) -> None:
        assert REFRESH_INTERVAL == 5.0
        assert REFRESH_INTERVAL_DEFAULT == REFRESH_INTERVAL

    def test_notification_ttl(self) -> None:
        assert isinstance(NOTIFICATION_TTL, float)
        assert NOTIFICATION_TTL == 3.0


# =============================================================================
# Log sizes
# =============================================================================


class TestLogSizes:
    """Test tail sizes and buffer limits."""

    def test_initial_tail(self) -> None:
        assert TAIL_LINES_DEFAULT == 500

    def test_restart_tail_only_new_lines(self) -> None:
        assert RESTART_TAIL_LINES == 0

    def test_multi_log_tail_within_buffer(self) -> None:
        assert 0 < MULTI_LOG_TAIL_LINES <= MAX_LOG_LINES

    def test_queue_is_bounded(self) -> None:
        assert LOG_QUEUE_CAPACITY > 0
