"""Utility functions and classes for podscope."""

from podscope.utils.log_sink import LogSink, LogSinkError
from podscope.utils.resource_parser import (
    format_age,
    format_cpu,
    format_memory,
    memory_str_to_bytes,
    parse_cpu_millicores,
    parse_timestamp,
)

__all__ = [
    # Logging
    "LogSink",
    "LogSinkError",
    # Resource parsing
    "format_age",
    "format_cpu",
    "format_memory",
    "memory_str_to_bytes",
    "parse_cpu_millicores",
    "parse_timestamp",
]
