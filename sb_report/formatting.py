"""Display formatting for report tables."""

from __future__ import annotations

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(size: int) -> str:
    """Render a byte count in the largest unit >= 1 (``1536 -> "1.5 KB"``).

    Zero renders as a placeholder dash.
    """
    if size == 0:
        return "-"

    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(BYTE_UNITS) - 1:
        value /= 1024
        unit += 1

    formatted = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{formatted} {BYTE_UNITS[unit]}"


def format_ms(ms: int) -> str:
    """Render milliseconds; 1000 and above switch to seconds with two decimals."""
    if ms < 1000:
        return f"{ms}ms"
    return f"{ms / 1000:.2f}s"


def format_speedup(value: float) -> str:
    return f"{value:.2f}x"
