from .humanize import SIZE_UNITS, format_rate, format_size, group_thousands
from .mime import DEFAULT_MIME, FOLDER_MIME, guess_mime_type
from .time import normalize_dt, parse_rfc3339

__all__ = [
    "SIZE_UNITS",
    "format_size",
    "format_rate",
    "group_thousands",
    "FOLDER_MIME",
    "DEFAULT_MIME",
    "guess_mime_type",
    "parse_rfc3339",
    "normalize_dt",
]
