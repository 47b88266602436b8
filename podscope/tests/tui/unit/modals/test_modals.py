"""Tests for the individual modal dialogs.

This module tests:
- Visibility and the initialization task returned by show
- Confirm dialog shortcuts and the highlighted button
- Scale input validation
- Live search values
- Masked passphrase entry
- Container and multi-pod selection
"""

from __future__ import annotations

import pytest

from podscope.constants.enums import ConfirmAction, ModalResult
from podscope.constants.values import ALL_PODS_VALUE, SCALE_MAX_REPLICAS
from podscope.core.messages import KeyPressed, ModalOpened, NotificationExpired
from podscope.modals import (
    ConfirmDialog,
    ConfirmRequest,
    ContainerSelector,
    HelpModal,
    PassphraseInput,
    PodMultiSelector,
    ScaleDialog,
    ScaleRequest,
    SearchInput,
    TextField,
    validate_replicas,
)


def press(modal, *keys: str):
    outcome = None
    for key in keys:
        outcome = modal.update(KeyPressed(key))
    return outcome


# =============================================================================
# Base behaviour
# =============================================================================


class TestModalBase:
    """Tests shared by every modal."""

    @pytest.mark.asyncio
    async def test_show_returns_init_task(self) -> None:
        modal = HelpModal()
        task = modal.show()
        assert modal.visible
        assert task.name == "modal:help"
        message = await task.run()
        assert isinstance(message, ModalOpened)
        assert message.modal == "help"

    def test_hidden_modal_ignores_keys(self) -> None:
        modal = HelpModal()
        assert modal.update(KeyPressed("escape")).result is ModalResult.PENDING

    def test_non_key_messages_are_pending(self) -> None:
        modal = HelpModal()
        modal.show()
        assert not modal.update(NotificationExpired(1)).finished

    def test_render_builds_panel(self) -> None:
        modal = ConfirmDialog()
        modal.show(ConfirmAction.DELETE_POD, "web-7")
        assert modal.render() is not None


class TestTextField:
    """Tests for the single-line editor."""

    def test_edit_keys(self) -> None:
        field = TextField()
        for key in ("a", "space", "b"):
            assert field.handle_key(key)
        assert field.value == "a b"
        field.handle_key("backspace")
        assert field.value == "a "
        field.handle_key("ctrl+u")
        assert field.value == ""

    def test_non_edit_key_is_rejected(self) -> None:
        assert not TextField().handle_key("up")

    def test_max_length(self) -> None:
        field = TextField(max_length=2)
        for key in "abc":
            field.handle_key(key)
        assert field.value == "ab"

    def test_masked_display(self) -> None:
        field = TextField("secret", masked=True)
        assert field.display == "••••••"


# =============================================================================
# Confirm
# =============================================================================


class TestConfirmDialog:
    """Tests for ConfirmDialog."""

    def test_y_confirms_with_request(self) -> None:
        dialog = ConfirmDialog()
        dialog.show(ConfirmAction.DELETE_POD, "web-7")
        outcome = press(dialog, "y")
        assert outcome.result is ModalResult.CONFIRMED
        assert outcome.value == ConfirmRequest(ConfirmAction.DELETE_POD, "web-7")

    def test_message_names_target(self) -> None:
        dialog = ConfirmDialog()
        dialog.show(ConfirmAction.RESTART_DEPLOYMENT, "web")
        assert dialog.title == "Restart Deployment"
        assert "'web'" in dialog.message

    @pytest.mark.parametrize("key", ["n", "N", "escape"])
    def test_cancel_keys(self, key: str) -> None:
        dialog = ConfirmDialog()
        dialog.show(ConfirmAction.DELETE_POD, "web-7")
        assert press(dialog, key).result is ModalResult.CANCELLED

    def test_enter_starts_on_no(self) -> None:
        dialog = ConfirmDialog()
        dialog.show(ConfirmAction.DELETE_POD, "web-7")
        assert press(dialog, "enter").result is ModalResult.CANCELLED

    def test_moving_highlight_then_enter_confirms(self) -> None:
        dialog = ConfirmDialog()
        dialog.show(ConfirmAction.DELETE_POD, "web-7")
        assert not press(dialog, "left").finished
        assert press(dialog, "enter").result is ModalResult.CONFIRMED

    def test_hide_resets_target(self) -> None:
        dialog = ConfirmDialog()
        dialog.show(ConfirmAction.DELETE_POD, "web-7")
        dialog.hide()
        assert dialog.target == ""
        assert dialog.action is None


# =============================================================================
# Scale
# =============================================================================


class TestScaleDialog:
    """Tests for ScaleDialog and replica validation."""

    def test_prefilled_with_current_count(self) -> None:
        dialog = ScaleDialog()
        dialog.show("web", 3)
        assert dialog.field.value == "3"

    def test_valid_entry_confirms(self) -> None:
        dialog = ScaleDialog()
        dialog.show("web", 3)
        outcome = press(dialog, "backspace", "1", "0", "enter")
        assert outcome.result is ModalResult.CONFIRMED
        assert outcome.value == ScaleRequest("web", 10)

    def test_invalid_entry_stays_open_with_error(self) -> None:
        dialog = ScaleDialog()
        dialog.show("web", 3)
        outcome = press(dialog, "ctrl+u", "x", "enter")
        assert outcome.result is ModalResult.PENDING
        assert dialog.error == "invalid number"

        press(dialog, "backspace")
        assert dialog.error == ""

    def test_validate_replicas_bounds(self) -> None:
        assert validate_replicas(" 0 ") == 0
        with pytest.raises(ValueError, match=">= 0"):
            validate_replicas("-1")
        with pytest.raises(ValueError, match="max is"):
            validate_replicas(str(SCALE_MAX_REPLICAS + 1))


# =============================================================================
# Search and passphrase
# =============================================================================


class TestSearchInput:
    """Tests for SearchInput."""

    def test_edits_report_live_query(self) -> None:
        search = SearchInput()
        search.show()
        outcome = press(search, "e", "r")
        assert outcome.result is ModalResult.PENDING
        assert outcome.value == "er"

    def test_enter_keeps_query(self) -> None:
        search = SearchInput()
        search.show("err")
        outcome = press(search, "enter")
        assert outcome.result is ModalResult.CONFIRMED
        assert outcome.value == "err"

    def test_escape_cancels(self) -> None:
        search = SearchInput()
        search.show("err")
        assert press(search, "escape").result is ModalResult.CANCELLED


class TestPassphraseInput:
    """Tests for PassphraseInput."""

    def test_typed_value_is_masked_and_returned(self) -> None:
        prompt = PassphraseInput()
        prompt.show("node-1")
        press(prompt, "p", "w")
        assert prompt.field.display == "••"
        outcome = press(prompt, "enter")
        assert outcome.result is ModalResult.CONFIRMED
        assert outcome.value == "pw"

    def test_hide_forgets_value(self) -> None:
        prompt = PassphraseInput()
        prompt.show("node-1")
        press(prompt, "p")
        prompt.hide()
        assert prompt.field.value == ""


# =============================================================================
# Selectors
# =============================================================================


class TestContainerSelector:
    """Tests for ContainerSelector."""

    def test_cursor_starts_on_current(self) -> None:
        selector = ContainerSelector()
        selector.show(["web", "sidecar"], "sidecar")
        assert selector.highlighted == "sidecar"

    def test_navigation_is_clamped(self) -> None:
        selector = ContainerSelector()
        selector.show(["web", "sidecar"])
        outcome = press(selector, "down", "down", "enter")
        assert outcome.value == "sidecar"

    def test_c_cancels(self) -> None:
        selector = ContainerSelector()
        selector.show(["web", "sidecar"])
        assert press(selector, "c").result is ModalResult.CANCELLED


class TestPodMultiSelector:
    """Tests for PodMultiSelector."""

    def test_all_pods_option_is_first(self) -> None:
        selector = PodMultiSelector()
        selector.show(["api-1", "web-7"])
        assert selector.options[0][0] == ALL_PODS_VALUE

    def test_all_pods_expands_to_every_pod(self) -> None:
        selector = PodMultiSelector()
        selector.show(["api-1", "web-7"])
        outcome = press(selector, "space", "enter")
        assert outcome.value == ["api-1", "web-7"]

    def test_checked_pods_keep_list_order(self) -> None:
        selector = PodMultiSelector()
        selector.show(["api-1", "web-7", "worker-3"])
        outcome = press(selector, "down", "down", "down", "space", "up", "up", "space", "enter")
        assert outcome.value == ["api-1", "worker-3"]

    def test_enter_without_checks_uses_highlight(self) -> None:
        selector = PodMultiSelector()
        selector.show(["api-1", "web-7"])
        outcome = press(selector, "down", "down", "enter")
        assert outcome.value == ["web-7"]

    def test_typing_filters_options(self) -> None:
        selector = PodMultiSelector()
        selector.show(["api-1", "web-7"])
        press(selector, "w", "e")
        assert [value for value, _ in selector.options] == [ALL_PODS_VALUE, "web-7"]
        assert selector.cursor == 0
