"""Resource parsing and formatting for metrics and ages.

Converts ``kubectl top`` quantities into numbers for the metrics column:
- CPU: parsed to millicores (float)
- Memory: parsed to bytes (float)

Also formats Kubernetes timestamps as short ages ("5m", "3d").
"""

from __future__ import annotations

from datetime import datetime, timezone

# Suffix multipliers for memory_str_to_bytes(); binary before decimal so
# "Mi" is not mistaken for "M".
_MEMORY_BYTES_MULTIPLIERS: tuple[tuple[str, int], ...] = (
    ("Ki", 1024),
    ("Mi", 1024**2),
    ("Gi", 1024**3),
    ("Ti", 1024**4),
    ("k", 1000),
    ("M", 1000**2),
    ("G", 1000**3),
    ("T", 1000**4),
)


def parse_cpu_millicores(cpu_str: str) -> float:
    """Parse a CPU quantity to millicores.

    Handles:
    - Nanocores: "500000000n" -> 500.0
    - Millicores: "100m" -> 100.0
    - Cores: "1.5" -> 1500.0

    Returns 0.0 on parse error or empty string.
    """
    if not cpu_str:
        return 0.0

    cpu_str = str(cpu_str).strip()
    try:
        if cpu_str.endswith("n"):
            return float(cpu_str[:-1]) / 1_000_000
        if cpu_str.endswith("u"):
            return float(cpu_str[:-1]) / 1000
        if cpu_str.endswith("m"):
            return float(cpu_str[:-1])
        return float(cpu_str) * 1000
    except ValueError:
        return 0.0


def memory_str_to_bytes(memory_str: str) -> float:
    """Convert a memory quantity ("512Mi", "1Gi", "100M") to bytes.

    Returns 0.0 on parse error or empty string.
    """
    if not memory_str:
        return 0.0

    memory_str = str(memory_str).strip()

    for suffix, mult in _MEMORY_BYTES_MULTIPLIERS:
        if memory_str.endswith(suffix):
            try:
                return float(memory_str[: -len(suffix)]) * mult
            except ValueError:
                return 0.0

    # Handle plain bytes
    try:
        return float(memory_str)
    except ValueError:
        return 0.0


def format_cpu(millicores: float) -> str:
    return f"{int(round(millicores))}m"


def format_memory(value_bytes: float) -> str:
    mebibytes = value_bytes / 1024**2
    if mebibytes >= 1024:
        return f"{mebibytes / 1024:.1f}Gi"
    return f"{int(round(mebibytes))}Mi"


def parse_timestamp(timestamp: object) -> datetime | None:
    """Parse an RFC 3339 Kubernetes timestamp into an aware datetime."""
    if not isinstance(timestamp, str) or not timestamp:
        return None
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_age(timestamp: datetime | None, now: datetime | None = None) -> str:
    """Render the time since ``timestamp`` the way kubectl does ("45s", "3h", "12d")."""
    if timestamp is None:
        return "<unknown>"
    current = now or datetime.now(timezone.utc)
    seconds = max(int((current - timestamp).total_seconds()), 0)
    if seconds < 60:
        return f"{seconds}s"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h"
    return f"{hours // 24}d"
