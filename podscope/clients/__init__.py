"""Cluster and remote-host clients."""

from podscope.clients.base import (
    ClientError,
    ClusterClient,
    CommandError,
    LogOptions,
    NotConnectedError,
    PassphraseRequiredError,
    RemoteHostClient,
)
from podscope.clients.kubectl import KubectlClient
from podscope.clients.ssh import SSHClient

__all__ = [
    "ClientError",
    "ClusterClient",
    "CommandError",
    "KubectlClient",
    "LogOptions",
    "NotConnectedError",
    "PassphraseRequiredError",
    "RemoteHostClient",
    "SSHClient",
]
