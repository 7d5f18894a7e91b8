"""Error taxonomy for XMP packet loading.

Every failure of a load attempt falls into exactly one ErrorKind. Low-level
operations raise the matching exception; the load pipeline turns it into a
LoadResult value instead of letting it escape.
"""

from enum import Enum, auto
from typing import Optional


class ErrorKind(Enum):
    """Kinds of failure a load attempt can end with."""

    IO_ERROR = auto()          # Host file could not be read
    PACKET_NOT_FOUND = auto()  # One of the xpacket markers is missing
    XML_PARSE_ERROR = auto()   # Packet text is not well-formed XML


class XmpeekError(Exception):
    """Base exception for all packet loading failures."""

    # Set by each concrete subclass
    kind: Optional[ErrorKind] = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Convert error to a JSON friendly dictionary."""
        return {
            "kind": self.kind.name if self.kind is not None else None,
            "message": self.message,
        }


class PacketIOError(XmpeekError):
    """Raised when the host file cannot be read."""

    kind = ErrorKind.IO_ERROR

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class PacketNotFoundError(XmpeekError):
    """Raised when the begin, end-start or closing marker is missing."""

    kind = ErrorKind.PACKET_NOT_FOUND

    MARKERS = ("begin", "end_start", "closing")

    def __init__(self, message: str, marker: str) -> None:
        if marker not in self.MARKERS:
            raise ValueError(f"marker must be one of {self.MARKERS}")
        super().__init__(message)
        self.marker = marker

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["marker"] = self.marker
        return result


class XmlParseError(XmpeekError):
    """Raised when the decoded packet text is not well-formed XML."""

    kind = ErrorKind.XML_PARSE_ERROR

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.line is not None:
            result["line"] = self.line
        if self.column is not None:
            result["column"] = self.column
        return result
