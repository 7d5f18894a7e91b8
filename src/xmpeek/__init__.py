"""xmpeek.

Locates the embedded XMP packet inside an arbitrary binary file (image,
document), extracts its exact bytes and turns its XML into a simplified tree
ready for display.

Progressive API Disclosure:
- Level 1: Simple functions - load_file(), load_bytes(), locate_packet()
- Level 2: Configured loader - XmpLoader class with XmpeekConfig
- Level 3: Individual stages - PacketLocator, parse_packet_xml(), XmlTreeBuilder
"""

__version__ = "0.1.0"
__author__ = "xmpeek developers"

from .api import LoadResult, XmpLoader, load_bytes, load_file, load_file_async
from .packet import ExtractedPacket, PacketLocator, locate_packet
from .shared.config import XmpeekConfig
from .shared.errors import (
    ErrorKind,
    PacketIOError,
    PacketNotFoundError,
    XmlParseError,
    XmpeekError,
)
from .tree import XmlNode, XmlTreeBuilder, build_tree, render_text

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "load_file",
    "load_bytes",
    "load_file_async",
    "locate_packet",
    "build_tree",
    "render_text",

    # Level 2: Configured loader
    "XmpLoader",
    "XmpeekConfig",

    # Level 3: Individual stages and data model
    "PacketLocator",
    "XmlTreeBuilder",
    "ExtractedPacket",
    "XmlNode",
    "LoadResult",

    # Errors
    "ErrorKind",
    "XmpeekError",
    "PacketIOError",
    "PacketNotFoundError",
    "XmlParseError",
]
