"""
Date-based file handler for Wonolog.

Writes each record to a file whose path is derived from the record date,
so logs rotate naturally by day (or any other date granularity):

    /var/log/app/{date}.log  +  "Y/m/d"  ->  /var/log/app/2026/10/19.log

Date formats use the short token syntax (Y, m, d, H, i, s...). A format
containing "%" is treated as a plain strftime format instead.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from ..locking import lock, unlock

DEFAULT_DATE_FORMAT = "Y/m/d"
DATE_PLACEHOLDER = "{date}"

# Token -> how to render it from a datetime
_DATE_TOKENS = {
    "Y": lambda d: f"{d.year:04d}",
    "y": lambda d: f"{d.year % 100:02d}",
    "m": lambda d: f"{d.month:02d}",
    "n": lambda d: str(d.month),
    "d": lambda d: f"{d.day:02d}",
    "j": lambda d: str(d.day),
    "H": lambda d: f"{d.hour:02d}",
    "G": lambda d: str(d.hour),
    "i": lambda d: f"{d.minute:02d}",
    "s": lambda d: f"{d.second:02d}",
}


def format_date(moment: datetime, date_format: str) -> str:
    """
    Render moment with a token date format.

    A backslash escapes the next character, any other character that is
    not a token is copied as-is.
    """
    if "%" in date_format:
        return moment.strftime(date_format)

    parts = []
    escaped = False
    for char in date_format:
        if escaped:
            parts.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in _DATE_TOKENS:
            parts.append(_DATE_TOKENS[char](moment))
        else:
            parts.append(char)
    return "".join(parts)


class DateBasedFileHandler(logging.Handler):
    """
    Logging handler writing to a file per date.

    Attributes:
        path_pattern: Path with a {date} placeholder
        date_format: Format used to render {date}
        bubble: Whether records should keep propagating after this handler
        use_locking: Take an advisory lock around every write
    """

    terminator = "\n"

    def __init__(
        self,
        path_pattern: str,
        date_format: str = DEFAULT_DATE_FORMAT,
        level: int = logging.DEBUG,
        bubble: bool = True,
        use_locking: bool = True,
        encoding: str = "utf-8",
    ):
        if not isinstance(path_pattern, str) or not isinstance(date_format, str):
            raise TypeError("path_pattern and date_format must be strings")
        if not path_pattern or not date_format:
            raise ValueError("path_pattern and date_format must not be empty")
        format_date(datetime.now(), date_format)

        super().__init__(level)
        self.path_pattern = path_pattern
        self.date_format = date_format
        self.bubble = bool(bubble)
        self.use_locking = bool(use_locking)
        self.encoding = encoding

        self.stream: Optional[TextIO] = None
        self._current_path: Optional[str] = None

    def path_for(self, timestamp: float) -> str:
        """Log file path for a record created at timestamp (local time)."""
        moment = datetime.fromtimestamp(timestamp)
        # Only the {date} token is replaced; other braces are part of the path
        return self.path_pattern.replace(DATE_PLACEHOLDER, format_date(moment, self.date_format))

    def _open(self, path: str) -> TextIO:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        return open(path, "a", encoding=self.encoding)

    def _close_stream(self) -> None:
        if self.stream is not None:
            try:
                self.stream.close()
            finally:
                self.stream = None
                self._current_path = None

    def emit(self, record: logging.LogRecord) -> None:
        try:
            path = self.path_for(record.created)
            if path != self._current_path:
                self._close_stream()
                self.stream = self._open(path)
                self._current_path = path

            message = self.format(record) + self.terminator

            if self.use_locking:
                lock(self.stream)
            try:
                self.stream.write(message)
                self.stream.flush()
            finally:
                if self.use_locking:
                    unlock(self.stream)
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        self.acquire()
        try:
            self._close_stream()
        finally:
            self.release()
            super().close()

    def __repr__(self) -> str:
        level = logging.getLevelName(self.level)
        return f"<{self.__class__.__name__} {self.path_pattern} ({level})>"
