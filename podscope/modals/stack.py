"""Fixed-priority container for every modal."""

from __future__ import annotations

import logging
from typing import Any

from podscope.core.tasks import Task
from podscope.modals.base import Modal
from podscope.modals.confirm import ConfirmDialog
from podscope.modals.container_selector import ContainerSelector
from podscope.modals.help import HelpModal
from podscope.modals.passphrase import PassphraseInput
from podscope.modals.pod_multi_selector import PodMultiSelector
from podscope.modals.scale import ScaleDialog
from podscope.modals.search import SearchInput

logger = logging.getLogger(__name__)


class ModalStack:
    """Owns one instance of each modal and keeps at most one visible.

    ``visible_modal`` checks modals in the fixed order confirm, scale, help,
    container selector, multi-pod selector, passphrase, search.
    """

    def __init__(self) -> None:
        self.confirm = ConfirmDialog()
        self.scale = ScaleDialog()
        self.help = HelpModal()
        self.container_selector = ContainerSelector()
        self.multi_pod_selector = PodMultiSelector()
        self.passphrase = PassphraseInput()
        self.search = SearchInput()

    @property
    def ordered(self) -> tuple[Modal, ...]:
        return (
            self.confirm,
            self.scale,
            self.help,
            self.container_selector,
            self.multi_pod_selector,
            self.passphrase,
            self.search,
        )

    @property
    def any_visible(self) -> bool:
        return self.visible_modal() is not None

    def visible_modal(self) -> Modal | None:
        for modal in self.ordered:
            if modal.visible:
                return modal
        return None

    def show(self, modal: Modal, *args: Any) -> Task:
        """Show ``modal`` after hiding any other visible modal."""
        self.hide_others(modal)
        return modal.show(*args)  # type: ignore[attr-defined]

    def hide_others(self, keep: Modal) -> None:
        for modal in self.ordered:
            if modal is not keep and modal.visible:
                logger.debug("Hiding modal %s to show %s", modal.name, keep.name)
                modal.hide()

    def hide_all(self) -> None:
        for modal in self.ordered:
            if modal.visible:
                modal.hide()
