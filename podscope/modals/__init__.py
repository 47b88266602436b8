"""Modal overlays."""

from podscope.modals.base import Modal, ModalOutcome, TextField
from podscope.modals.confirm import ConfirmDialog, ConfirmRequest
from podscope.modals.container_selector import ContainerSelector
from podscope.modals.help import HelpModal
from podscope.modals.passphrase import PassphraseInput
from podscope.modals.pod_multi_selector import PodMultiSelector
from podscope.modals.scale import ScaleDialog, ScaleRequest, validate_replicas
from podscope.modals.search import SearchInput
from podscope.modals.stack import ModalStack

__all__ = [
    "ConfirmDialog",
    "ConfirmRequest",
    "ContainerSelector",
    "HelpModal",
    "Modal",
    "ModalOutcome",
    "ModalStack",
    "PassphraseInput",
    "PodMultiSelector",
    "ScaleDialog",
    "ScaleRequest",
    "SearchInput",
    "TextField",
    "validate_replicas",
]
