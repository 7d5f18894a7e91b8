"""XMP packet localization inside binary host files."""

from .locator import (
    XPACKET_BEGIN,
    XPACKET_END,
    XPACKET_END_START,
    ExtractedPacket,
    PacketLocator,
    locate_packet,
)

__all__ = [
    "XPACKET_BEGIN",
    "XPACKET_END",
    "XPACKET_END_START",
    "ExtractedPacket",
    "PacketLocator",
    "locate_packet",
]
