"""Static view transition tables."""

from typing import Final

from podscope.constants.enums import ViewState

# ============================================================================
# Back navigation
# ============================================================================

# Fixed single-level parent per view. LOGS is absent: it returns to the view
# it was entered from (``AppState.log_source_view``). NAMESPACES, SSH_HOSTS
# and MAIN depend on the connection and are resolved by the dispatcher.
BACK_TRANSITIONS: Final[dict[ViewState, ViewState]] = {
    ViewState.PODS: ViewState.NAMESPACES,
    ViewState.POD_DETAILS: ViewState.PODS,
    ViewState.MULTI_POD_LOGS: ViewState.PODS,
    ViewState.DEPLOYMENTS: ViewState.PODS,
    ViewState.DEPLOYMENT_DETAILS: ViewState.DEPLOYMENTS,
    ViewState.SERVICES: ViewState.PODS,
    ViewState.SERVICE_DETAILS: ViewState.SERVICES,
    ViewState.EVENTS: ViewState.PODS,
    ViewState.REMOTE_CONTAINERS: ViewState.SSH_HOSTS,
    ViewState.REMOTE_LOGS: ViewState.REMOTE_CONTAINERS,
    ViewState.NODE_INFO: ViewState.REMOTE_CONTAINERS,
}

# ============================================================================
# Direct jumps
# ============================================================================

DIGIT_VIEWS: Final[dict[str, ViewState]] = {
    "1": ViewState.NAMESPACES,
    "2": ViewState.PODS,
    "3": ViewState.DEPLOYMENTS,
    "4": ViewState.SERVICES,
    "5": ViewState.EVENTS,
}

# ============================================================================
# View groups
# ============================================================================

REFRESHING_VIEWS: Final = frozenset({ViewState.PODS, ViewState.EVENTS})

# Views where ``q`` quits; the connecting screens only honour ctrl+c.
QUIT_VIEWS: Final = frozenset(ViewState) - {ViewState.CONNECTING, ViewState.SSH_CONNECTING}

# Views whose leaving must stop the remote host session.
REMOTE_VIEWS: Final = frozenset(
    {ViewState.REMOTE_CONTAINERS, ViewState.REMOTE_LOGS, ViewState.NODE_INFO}
)

__all__ = [
    "BACK_TRANSITIONS",
    "DIGIT_VIEWS",
    "QUIT_VIEWS",
    "REFRESHING_VIEWS",
    "REMOTE_VIEWS",
]
