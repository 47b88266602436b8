"""podscope - terminal UI for Kubernetes clusters and node container logs."""

__version__ = "0.1.0"
