"""Load pipeline for XMP packets embedded in host files.

Reads the host file, locates the packet, decodes it as best-effort UTF-8,
parses it with lxml and builds the simplified tree. The low-level steps raise
XmpeekError subclasses; the load functions never raise them and instead
report the failure in a LoadResult.
"""

import time
import uuid
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from lxml import etree

from xmpeek.packet import ExtractedPacket, PacketLocator
from xmpeek.shared import (
    ContextLogger,
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    PacketIOError,
    XmlParseError,
    XmlParserConfig,
    XmpeekConfig,
    XmpeekError,
    get_logger,
)
from xmpeek.tree import XmlNode, XmlTreeBuilder

PathLike = Union[str, Path]

MS_PER_SECOND = 1000
NO_FILE_STATUS = "..."


@dataclass
class LoadResult:
    """Outcome of one load attempt.

    ``packet`` is kept even when parsing failed, so the raw packet can still
    be exported after an XML parse error.
    """

    source: Optional[str] = None
    packet: Optional[ExtractedPacket] = None
    root: Optional[XmlNode] = None
    error: Optional[XmpeekError] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    processing_time_ms: float = 0.0
    correlation_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None and self.root is not None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    @property
    def element_count(self) -> int:
        return self.root.element_count if self.root is not None else 0

    @property
    def status_line(self) -> str:
        """One-line summary of the loaded file and packet position."""
        if self.packet is None or self.source is None:
            return NO_FILE_STATUS
        return (
            f"File: {self.source} | xpacket - Offset: {self.packet.offset}, "
            f"Size: {self.packet.length}"
        )

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def raise_for_error(self) -> "LoadResult":
        """Raise the recorded error, if any, otherwise return self."""
        if self.error is not None:
            raise self.error
        return self

    def summary(self) -> Dict[str, Any]:
        """Get summary of the load attempt for reporting."""
        return {
            "file": self.source,
            "success": self.success,
            "offset": self.packet.offset if self.packet else None,
            "length": self.packet.length if self.packet else None,
            "element_count": self.element_count,
            "error": self.error.to_dict() if self.error else None,
            "processing_time_ms": self.processing_time_ms,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }


def read_host_file(path: PathLike) -> bytes:
    """Read the full contents of a host file.

    Raises:
        PacketIOError: If the file cannot be read
    """
    path_obj = Path(path)
    try:
        return path_obj.read_bytes()
    except OSError as e:
        raise PacketIOError(f"Failed to read file: {e}", path=str(path_obj)) from e


def decode_packet(data: bytes) -> str:
    """Decode packet bytes as UTF-8, replacing invalid sequences."""
    return data.decode("utf-8", errors="replace")


def _make_parser(config: XmlParserConfig) -> etree.XMLParser:
    # Text is always re-encoded as UTF-8, so the declared encoding is ignored
    return etree.XMLParser(
        encoding="utf-8",
        resolve_entities=config.resolve_entities,
        no_network=config.no_network,
        huge_tree=config.huge_tree,
        remove_comments=config.remove_comments,
    )


def parse_packet_xml(text: str, config: Optional[XmlParserConfig] = None) -> Any:
    """Parse decoded packet text and return its root element.

    Raises:
        XmlParseError: If the text is empty or not well-formed XML
    """
    if not text.strip():
        raise XmlParseError("Failed to parse XML: document is empty", line=1, column=1)

    parser = _make_parser(config or XmlParserConfig())
    try:
        root = etree.fromstring(text.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        line, column = e.position if e.position else (None, None)
        raise XmlParseError(f"Failed to parse XML: {e}", line=line, column=column) from e

    if root is None:
        raise XmlParseError("Failed to parse XML: no root element")
    return root


class XmpLoader:
    """Runs the load pipeline with a fixed configuration.

    Examples:
        >>> loader = XmpLoader()
        >>> result = loader.load_bytes(b'<?xpacket begin=""?><a/><?xpacket end="w"?>')
        >>> result.root.name
        'a'
    """

    def __init__(
        self,
        config: Optional[XmpeekConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or XmpeekConfig()
        self.correlation_id = correlation_id

    def _new_result(self, source: Optional[str]) -> LoadResult:
        correlation_id = self.correlation_id
        if correlation_id is None and self.config.global_.enable_correlation_tracking:
            correlation_id = uuid.uuid4().hex[:12]
        return LoadResult(source=source, correlation_id=correlation_id)

    def _logger_for(self, result: LoadResult) -> ContextLogger:
        return get_logger(__name__, result.correlation_id, "xmp_loader").bind(
            source=result.source
        )

    def load_file(self, path: PathLike) -> LoadResult:
        """Load the packet and tree from the file at ``path``."""
        start_time = time.time()
        result = self._new_result(str(path))
        self._logger_for(result).info("Starting file load")

        try:
            data = read_host_file(path)
        except PacketIOError as e:
            self._fail(result, e, "host_reader", start_time)
            return result

        result.add_diagnostic(
            DiagnosticSeverity.DEBUG,
            "Host file read",
            "host_reader",
            details={"size": len(data)},
        )
        return self._run(data, result, start_time)

    def load_bytes(self, data: bytes, source: Optional[str] = None) -> LoadResult:
        """Load the packet and tree from an in-memory host buffer."""
        start_time = time.time()
        result = self._new_result(source)
        return self._run(data, result, start_time)

    def _run(self, data: bytes, result: LoadResult, start_time: float) -> LoadResult:
        try:
            result.packet = PacketLocator(result.correlation_id).locate(data)
        except XmpeekError as e:
            self._fail(result, e, "packet_locator", start_time)
            return result

        result.add_diagnostic(
            DiagnosticSeverity.INFO,
            "Packet located",
            "packet_locator",
            details=result.packet.to_dict(),
        )

        try:
            text = result.packet.data.decode("utf-8")
        except UnicodeDecodeError as e:
            text = decode_packet(result.packet.data)
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                "Packet contains invalid UTF-8; replaced with U+FFFD",
                "packet_decoder",
                details={"first_invalid_offset": e.start},
            )

        try:
            element = parse_packet_xml(text, self.config.xml)
        except XmlParseError as e:
            self._fail(result, e, "xml_parser", start_time)
            return result

        builder = XmlTreeBuilder(self.config.tree, result.correlation_id)
        result.root = builder.build(element)
        result.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND

        self._logger_for(result).info(
            "File load completed",
            extra={
                "offset": result.packet.offset,
                "length": result.packet.length,
                "element_count": result.element_count,
                "processing_time_ms": result.processing_time_ms,
            },
        )
        return result

    def _fail(
        self,
        result: LoadResult,
        error: XmpeekError,
        component: str,
        start_time: float,
    ) -> None:
        result.error = error
        result.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            error.message,
            component,
            details=error.to_dict(),
        )
        self._logger_for(result).error(
            "File load failed",
            extra={"error_kind": error.to_dict()["kind"], "error": error.message},
        )

    def load_file_async(
        self, path: PathLike, executor: Optional[Executor] = None
    ) -> "Future[LoadResult]":
        """Run load_file on a worker thread and return its future.

        Without an executor a single-worker pool is created for this call and
        shut down once the load has been submitted.
        """
        if executor is not None:
            return executor.submit(self.load_file, path)

        own_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="xmpeek-load")
        try:
            return own_executor.submit(self.load_file, path)
        finally:
            own_executor.shutdown(wait=False)


def load_file(path: PathLike, config: Optional[XmpeekConfig] = None) -> LoadResult:
    """Load the packet and tree from the file at ``path``.

    Examples:
        >>> result = load_file('photo.jpg')
        >>> result.status_line
        'File: photo.jpg | xpacket - Offset: 24, Size: 3519'

        Missing file handling:
        >>> result = load_file('missing.jpg')
        >>> result.error_kind
        <ErrorKind.IO_ERROR: 1>
    """
    return XmpLoader(config).load_file(path)


def load_bytes(
    data: bytes,
    source: Optional[str] = None,
    config: Optional[XmpeekConfig] = None,
) -> LoadResult:
    """Load the packet and tree from an in-memory host buffer."""
    return XmpLoader(config).load_bytes(data, source)


def load_file_async(
    path: PathLike,
    executor: Optional[Executor] = None,
    config: Optional[XmpeekConfig] = None,
) -> "Future[LoadResult]":
    """Load ``path`` on a worker thread; see XmpLoader.load_file_async."""
    return XmpLoader(config).load_file_async(path, executor)
