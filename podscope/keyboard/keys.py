"""Key names routed by the dispatcher and the hints shown for them.

Keys are the normalized names produced by the Textual app: printable
characters as themselves, everything else as Textual key names.
"""

from typing import Final

from podscope.constants.enums import ViewState

# ============================================================================
# Global keys
# ============================================================================

KEY_QUIT: Final = "q"
KEY_FORCE_QUIT: Final = "ctrl+c"
KEY_HELP: Final = "?"
KEY_BACK: Final = "escape"
KEY_SELECT: Final = "enter"
KEY_REFRESH: Final = "r"
KEY_SSH_HOSTS: Final = "9"

# ============================================================================
# View action keys
# ============================================================================

KEY_LOGS: Final = "l"
KEY_MULTI_LOGS: Final = "L"
KEY_DELETE: Final = "d"
KEY_RESTART: Final = "R"
KEY_SCALE: Final = "s"
KEY_FOLLOW: Final = "f"
KEY_TIMESTAMPS: Final = "t"
KEY_METRICS: Final = "m"
KEY_CONTAINER: Final = "c"
KEY_SEARCH: Final = "/"
KEY_SEARCH_NEXT: Final = "n"
KEY_SEARCH_PREV: Final = "N"
KEY_WARNINGS: Final = "w"
KEY_KIND: Final = "k"
KEY_NODE_INFO: Final = "i"
KEY_CLEAR: Final = "C"

# ============================================================================
# List navigation keys
# ============================================================================

KEYS_UP: Final = ("up", "k")
KEYS_DOWN: Final = ("down", "j")
KEYS_TOP: Final = ("home", "g")
KEYS_BOTTOM: Final = ("end", "G")
KEYS_PAGE_UP: Final = ("pageup", "ctrl+u")
KEYS_PAGE_DOWN: Final = ("pagedown", "ctrl+d")
KEY_FILTER: Final = "/"

# ============================================================================
# Footer hints per view
# ============================================================================

_LIST_HINT: Final = "↑/↓ move • / filter"

FOOTER_HINTS: Final[dict[ViewState, str]] = {
    ViewState.CONFIG_SELECT: f"{_LIST_HINT} • enter connect • q quit",
    ViewState.CONNECTING: "ctrl+c quit",
    ViewState.NAMESPACES: f"{_LIST_HINT} • enter select • 9 ssh • esc back • ? help",
    ViewState.PODS: f"{_LIST_HINT} • enter details • l logs • L multi-logs • d delete • R restart • m metrics • ? help",
    ViewState.POD_DETAILS: "l logs • d delete • R restart • r refresh • esc back",
    ViewState.LOGS: "f follow • t timestamps • c container • / search • n/N next/prev • r refresh • esc back",
    ViewState.MULTI_POD_LOGS: "f follow • C clear • esc back",
    ViewState.DEPLOYMENTS: f"{_LIST_HINT} • enter details • s scale • R restart • d delete • ? help",
    ViewState.DEPLOYMENT_DETAILS: "s scale • R restart • d delete • r refresh • esc back",
    ViewState.SERVICES: f"{_LIST_HINT} • enter details • r refresh • ? help",
    ViewState.SERVICE_DETAILS: "r refresh • esc back",
    ViewState.EVENTS: "f follow • w warnings • k kind • r refresh • esc back",
    ViewState.SSH_HOSTS: f"{_LIST_HINT} • enter connect • esc back",
    ViewState.SSH_CONNECTING: "ctrl+c quit",
    ViewState.REMOTE_CONTAINERS: f"{_LIST_HINT} • enter logs • i node info • r refresh • esc back",
    ViewState.REMOTE_LOGS: "f follow • t timestamps • / search • n/N next/prev • r refresh • esc back",
    ViewState.NODE_INFO: "r refresh • esc back",
    ViewState.MAIN: "r retry • esc back • q quit",
}

# ============================================================================
# Help overlay sections
# ============================================================================

HELP_SECTIONS: Final[tuple[tuple[str, tuple[tuple[str, str], ...]], ...]] = (
    (
        "Navigation",
        (
            ("1-5", "namespaces, pods, deployments, services, events"),
            ("9", "ssh hosts"),
            ("enter", "select / open details"),
            ("esc", "back"),
            ("/", "filter list"),
            ("?", "toggle help"),
            ("q / ctrl+c", "quit"),
        ),
    ),
    (
        "Pods & Deployments",
        (
            ("l", "logs"),
            ("L", "multi-pod logs"),
            ("d", "delete"),
            ("R", "restart"),
            ("s", "scale deployment"),
            ("m", "toggle metrics"),
        ),
    ),
    (
        "Logs & Events",
        (
            ("f", "toggle follow"),
            ("t", "toggle timestamps"),
            ("c", "switch container"),
            ("/ n N", "search, next, previous"),
            ("w", "warnings only"),
            ("k", "cycle object kind"),
            ("r", "refresh"),
        ),
    ),
)

__all__ = [
    "FOOTER_HINTS",
    "HELP_SECTIONS",
    "KEYS_BOTTOM",
    "KEYS_DOWN",
    "KEYS_PAGE_DOWN",
    "KEYS_PAGE_UP",
    "KEYS_TOP",
    "KEYS_UP",
    "KEY_BACK",
    "KEY_CLEAR",
    "KEY_CONTAINER",
    "KEY_DELETE",
    "KEY_FILTER",
    "KEY_FOLLOW",
    "KEY_FORCE_QUIT",
    "KEY_HELP",
    "KEY_KIND",
    "KEY_LOGS",
    "KEY_METRICS",
    "KEY_MULTI_LOGS",
    "KEY_NODE_INFO",
    "KEY_QUIT",
    "KEY_REFRESH",
    "KEY_RESTART",
    "KEY_SCALE",
    "KEY_SEARCH",
    "KEY_SEARCH_NEXT",
    "KEY_SEARCH_PREV",
    "KEY_SELECT",
    "KEY_SSH_HOSTS",
    "KEY_TIMESTAMPS",
    "KEY_WARNINGS",
]
