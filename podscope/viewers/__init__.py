"""View models owned by the dispatcher."""

from podscope.viewers.details import DeploymentDetails, PodDetails, ServiceDetails
from podscope.viewers.event_viewer import EventViewer
from podscope.viewers.list_model import ListModel
from podscope.viewers.log_viewer import LogViewer
from podscope.viewers.multi_log_viewer import LogEntry, MultiLogViewer
from podscope.viewers.notification import Notification, NotificationCenter

__all__ = [
    "DeploymentDetails",
    "EventViewer",
    "ListModel",
    "LogEntry",
    "LogViewer",
    "MultiLogViewer",
    "Notification",
    "NotificationCenter",
    "PodDetails",
    "ServiceDetails",
]
