"""Human-readable byte counts, transfer rates and grouped integers."""

from __future__ import annotations

SIZE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB")
SIZE_STEP: int = 1000


def format_size(num_bytes: int, force_bytes: bool = False) -> str:
    """
    Format a byte count using decimal units with one decimal place.

    Examples:
        format_size(0)          -> "0.0 B"
        format_size(1500)       -> "1.5 KB"
        format_size(999, True)  -> "999 B"

    The numeric part stays below 1000 for every unit except PB, which absorbs
    anything larger.
    """
    if force_bytes:
        return f"{num_bytes} B"

    value = float(num_bytes)
    unit = 0
    while value >= SIZE_STEP and unit < len(SIZE_UNITS) - 1:
        value /= SIZE_STEP
        unit += 1
    return f"{value:.1f} {SIZE_UNITS[unit]}"


def format_rate(bytes_sent: int, elapsed_seconds: float) -> str:
    """
    Format a throughput as "<size>/s".

    Inside the first second the cumulative size is reported instead of a rate,
    so an early chunk never produces a divide-by-zero spike.
    """
    seconds = int(elapsed_seconds)
    if seconds < 1:
        return f"{format_size(bytes_sent)}/s"
    return f"{format_size(bytes_sent // seconds)}/s"


def group_thousands(value: int, sep: str = ",") -> str:
    """Insert `sep` every three digits from the right, keeping the sign."""
    grouped = f"{int(value):,}"
    if sep != ",":
        grouped = grouped.replace(",", sep)
    return grouped
