"""Public load API for XMP packets."""

from .loader import (
    LoadResult,
    XmpLoader,
    decode_packet,
    load_bytes,
    load_file,
    load_file_async,
    parse_packet_xml,
    read_host_file,
)

__all__ = [
    "LoadResult",
    "XmpLoader",
    "decode_packet",
    "load_bytes",
    "load_file",
    "load_file_async",
    "parse_packet_xml",
    "read_host_file",
]
