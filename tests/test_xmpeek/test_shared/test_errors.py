"""Tests for the error taxonomy and diagnostics."""

import pytest

from xmpeek.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    PacketIOError,
    PacketNotFoundError,
    XmlParseError,
    XmpeekError,
)


class TestErrors:
    """Test error kinds and serialization."""

    def test_kinds(self) -> None:
        assert PacketIOError("x").kind is ErrorKind.IO_ERROR
        assert PacketNotFoundError("x", marker="begin").kind is ErrorKind.PACKET_NOT_FOUND
        assert XmlParseError("x").kind is ErrorKind.XML_PARSE_ERROR

    def test_base_error_has_no_kind(self) -> None:
        """Test that only concrete errors report a failure kind."""
        error = XmpeekError("x")

        assert error.kind is None
        assert error.to_dict() == {"kind": None, "message": "x"}

    def test_all_errors_share_base(self) -> None:
        for error in (
            PacketIOError("x"),
            PacketNotFoundError("x", marker="closing"),
            XmlParseError("x"),
        ):
            assert isinstance(error, XmpeekError)
            assert str(error) == "x"
            assert error.message == "x"

    def test_invalid_marker_rejected(self) -> None:
        with pytest.raises(ValueError, match="marker must be one of"):
            PacketNotFoundError("x", marker="middle")

    def test_packet_not_found_to_dict(self) -> None:
        error = PacketNotFoundError("xpacket end marker not found", marker="end_start")

        assert error.to_dict() == {
            "kind": "PACKET_NOT_FOUND",
            "message": "xpacket end marker not found",
            "marker": "end_start",
        }

    def test_xml_parse_error_to_dict(self) -> None:
        assert XmlParseError("bad", line=3, column=7).to_dict() == {
            "kind": "XML_PARSE_ERROR",
            "message": "bad",
            "line": 3,
            "column": 7,
        }
        assert "line" not in XmlParseError("bad").to_dict()


class TestDiagnosticEntry:
    """Test diagnostic entries."""

    def test_empty_message_rejected(self) -> None:
        with pytest.raises(ValueError, match="Diagnostic message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "component")

    def test_empty_component_rejected(self) -> None:
        with pytest.raises(ValueError, match="Diagnostic component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "message", "")

    def test_is_error(self) -> None:
        assert DiagnosticEntry(DiagnosticSeverity.ERROR, "m", "c").is_error
        assert DiagnosticEntry(DiagnosticSeverity.CRITICAL, "m", "c").is_error
        assert not DiagnosticEntry(DiagnosticSeverity.WARNING, "m", "c").is_error

    def test_to_dict(self) -> None:
        entry = DiagnosticEntry(
            DiagnosticSeverity.INFO, "Packet located", "packet_locator", details={"offset": 4}
        )

        assert entry.to_dict() == {
            "severity": "INFO",
            "message": "Packet located",
            "component": "packet_locator",
            "details": {"offset": 4},
        }
