"""Locating the XMP packet inside a host file's bytes.

The packet is found purely by its delimiters: the first
``<?xpacket begin=`` marker, the first ``<?xpacket end=`` marker at or after
it, and the first ``?>`` at or after that. Each search is a single forward
``bytes.find`` over the remaining buffer, so the scan stays linear in the
size of the host file.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from xmpeek.shared import PacketIOError, PacketNotFoundError, get_logger

XPACKET_BEGIN = b"<?xpacket begin="
XPACKET_END_START = b"<?xpacket end="
XPACKET_END = b"?>"

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class ExtractedPacket:
    """An XMP packet copied out of its host buffer.

    ``data`` runs from the first byte of the begin marker through the closing
    ``?>`` inclusive, and ``offset`` is where it started in the host buffer.
    """

    data: bytes
    offset: int
    length: int

    def __post_init__(self) -> None:
        """Validate packet span."""
        if self.offset < 0:
            raise ValueError("Packet offset must be >= 0")
        if self.length != len(self.data):
            raise ValueError("Packet length must equal the size of its data")

    @property
    def end(self) -> int:
        """Exclusive end position of the packet in the host buffer."""
        return self.offset + self.length

    @property
    def text(self) -> str:
        """Packet decoded as UTF-8, invalid sequences replaced."""
        return self.data.decode("utf-8", errors="replace")

    def save(self, path: Union[str, Path]) -> Path:
        """Write the packet bytes unchanged to ``path``.

        Raises:
            PacketIOError: If the file cannot be written
        """
        path_obj = Path(path)
        try:
            path_obj.write_bytes(self.data)
        except OSError as e:
            raise PacketIOError(f"Failed to save file: {e}", path=str(path_obj)) from e
        return path_obj

    def to_dict(self) -> dict:
        return {"offset": self.offset, "length": self.length, "end": self.end}


class PacketLocator:
    """Finds the first XMP packet in a byte buffer."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.logger = get_logger(__name__, correlation_id, "packet_locator")

    def locate(self, data: BytesLike) -> ExtractedPacket:
        """Locate the first complete packet in ``data``.

        Args:
            data: Full contents of the host file

        Returns:
            ExtractedPacket holding an owned copy of the packet span

        Raises:
            PacketNotFoundError: If any of the three markers is missing
        """
        if isinstance(data, memoryview):
            data = data.tobytes()

        begin = data.find(XPACKET_BEGIN)
        if begin == -1:
            self._not_found("begin", len(data))
            raise PacketNotFoundError(
                "xpacket beginning marker not found", marker="begin"
            )

        end_start = data.find(XPACKET_END_START, begin)
        if end_start == -1:
            self._not_found("end_start", len(data), begin=begin)
            raise PacketNotFoundError("xpacket end marker not found", marker="end_start")

        closing = data.find(XPACKET_END, end_start)
        if closing == -1:
            self._not_found("closing", len(data), begin=begin)
            raise PacketNotFoundError(
                "xpacket closing token not found", marker="closing"
            )
        end = closing + len(XPACKET_END)

        packet = ExtractedPacket(data=bytes(data[begin:end]), offset=begin, length=end - begin)
        self.logger.debug(
            "Packet located",
            extra={"offset": packet.offset, "length": packet.length, "buffer_size": len(data)},
        )
        return packet

    def _not_found(self, marker: str, buffer_size: int, begin: Optional[int] = None) -> None:
        self.logger.warning(
            "Packet marker not found",
            extra={"marker": marker, "buffer_size": buffer_size, "begin": begin},
        )


def locate_packet(data: BytesLike) -> ExtractedPacket:
    """Locate the first XMP packet in ``data``.

    Examples:
        >>> packet = locate_packet(b'xx<?xpacket begin=""?><a/><?xpacket end="w"?>')
        >>> packet.offset, packet.data[-2:]
        (2, b'?>')
    """
    return PacketLocator().locate(data)
