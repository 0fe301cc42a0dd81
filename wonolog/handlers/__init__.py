"""
Wonolog - Handlers.

Handlers the default handler factory can produce. The file-based one lives
here; the disabled variant is the stdlib logging.NullHandler.
"""

from .date_based import DEFAULT_DATE_FORMAT, DateBasedFileHandler, format_date

__all__ = [
    "DEFAULT_DATE_FORMAT",
    "DateBasedFileHandler",
    "format_date",
]
