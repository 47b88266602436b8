"""Unit tests for navigation tables, footer hints and app bindings.

Tests cover:
- Back transitions reference real views and skip the dynamic parents
- Digit jumps map to the five cluster views
- View groups used for quitting, refreshing and remote cleanup
- Footer hints exist for every view
- Priority bindings for forced quit
"""

from __future__ import annotations

from podscope.constants.enums import EventKindFilter, ViewState
from podscope.core.navigation import (
    BACK_TRANSITIONS,
    DIGIT_VIEWS,
    QUIT_VIEWS,
    REFRESHING_VIEWS,
    REMOTE_VIEWS,
)
from podscope.keyboard.app import APP_BINDINGS
from podscope.keyboard.keys import FOOTER_HINTS, HELP_SECTIONS, KEY_SSH_HOSTS

# =============================================================================
# Back transitions
# =============================================================================


class TestBackTransitions:
    """Test BACK_TRANSITIONS table."""

    def test_targets_are_views(self) -> None:
        for source, target in BACK_TRANSITIONS.items():
            assert isinstance(source, ViewState)
            assert isinstance(target, ViewState)
            assert source is not target

    def test_logs_parent_is_dynamic(self) -> None:
        assert ViewState.LOGS not in BACK_TRANSITIONS

    def test_connection_dependent_views_absent(self) -> None:
        for view in (ViewState.NAMESPACES, ViewState.SSH_HOSTS, ViewState.MAIN):
            assert view not in BACK_TRANSITIONS

    def test_node_info_returns_to_containers(self) -> None:
        assert BACK_TRANSITIONS[ViewState.NODE_INFO] is ViewState.REMOTE_CONTAINERS

    def test_detail_views_return_to_lists(self) -> None:
        assert BACK_TRANSITIONS[ViewState.POD_DETAILS] is ViewState.PODS
        assert BACK_TRANSITIONS[ViewState.DEPLOYMENT_DETAILS] is ViewState.DEPLOYMENTS
        assert BACK_TRANSITIONS[ViewState.SERVICE_DETAILS] is ViewState.SERVICES


# =============================================================================
# Digit jumps and view groups
# =============================================================================


class TestDigitViews:
    """Test DIGIT_VIEWS table."""

    def test_keys(self) -> None:
        assert sorted(DIGIT_VIEWS) == ["1", "2", "3", "4", "5"]

    def test_order(self) -> None:
        assert [DIGIT_VIEWS[key] for key in "12345"] == [
            ViewState.NAMESPACES,
            ViewState.PODS,
            ViewState.DEPLOYMENTS,
            ViewState.SERVICES,
            ViewState.EVENTS,
        ]

    def test_ssh_hosts_key_is_separate(self) -> None:
        assert KEY_SSH_HOSTS == "9"
        assert KEY_SSH_HOSTS not in DIGIT_VIEWS


class TestViewGroups:
    """Test quit, refresh and remote view groups."""

    def test_quit_excludes_connecting_views(self) -> None:
        assert ViewState.CONNECTING not in QUIT_VIEWS
        assert ViewState.SSH_CONNECTING not in QUIT_VIEWS
        assert len(QUIT_VIEWS) == len(ViewState) - 2

    def test_refreshing_views(self) -> None:
        assert REFRESHING_VIEWS == {ViewState.PODS, ViewState.EVENTS}

    def test_remote_views(self) -> None:
        assert REMOTE_VIEWS == {
            ViewState.REMOTE_CONTAINERS,
            ViewState.REMOTE_LOGS,
            ViewState.NODE_INFO,
        }
        assert ViewState.SSH_HOSTS not in REMOTE_VIEWS


# =============================================================================
# Keyboard
# =============================================================================


class TestFooterHints:
    """Test FOOTER_HINTS and HELP_SECTIONS."""

    def test_every_view_has_hint(self) -> None:
        assert set(FOOTER_HINTS) == set(ViewState)

    def test_hints_are_non_empty(self) -> None:
        assert all(hint.strip() for hint in FOOTER_HINTS.values())

    def test_connecting_hint_only_offers_force_quit(self) -> None:
        assert FOOTER_HINTS[ViewState.CONNECTING] == "ctrl+c quit"

    def test_help_sections_have_entries(self) -> None:
        for title, entries in HELP_SECTIONS:
            assert title
            assert entries
            assert all(len(entry) == 2 for entry in entries)


class TestAppBindings:
    """Test APP_BINDINGS."""

    def test_force_quit_bindings(self) -> None:
        assert [binding.key for binding in APP_BINDINGS] == ["ctrl+c", "ctrl+q"]

    def test_bindings_have_priority(self) -> None:
        assert all(binding.priority for binding in APP_BINDINGS)

    def test_bindings_forward_to_dispatcher(self) -> None:
        assert all(binding.action == "dispatch_key('ctrl+c')" for binding in APP_BINDINGS)


# =============================================================================
# Enums
# =============================================================================


class TestEventKindFilter:
    """Test EventKindFilter cycling."""

    def test_next(self) -> None:
        assert EventKindFilter.ALL.next() is EventKindFilter.POD

    def test_wraps(self) -> None:
        assert EventKindFilter.NODE.next() is EventKindFilter.ALL

    def test_full_cycle(self) -> None:
        current = EventKindFilter.ALL
        for _ in range(len(EventKindFilter)):
            current = current.next()
        assert current is EventKindFilter.ALL
