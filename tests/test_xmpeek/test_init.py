"""Tests for the package-level API."""

import xmpeek


def test_version_info():
    """Test package metadata."""
    assert xmpeek.__version__ == "0.1.0"
    assert xmpeek.__author__ == "xmpeek developers"


def test_public_api_is_importable():
    """Test that every name in __all__ exists."""
    for name in xmpeek.__all__:
        assert hasattr(xmpeek, name), name


def test_simple_load_bytes():
    """Test the level 1 API end to end."""
    data = b'\x00\x01<?xpacket begin=""?><a><b>text</b></a><?xpacket end="w"?>\x02'

    result = xmpeek.load_bytes(data)

    assert result.success
    assert result.packet.offset == 2
    assert xmpeek.render_text(result.root) == "a\n  b\n    text"


def test_errors_share_base_class():
    assert issubclass(xmpeek.PacketNotFoundError, xmpeek.XmpeekError)
    assert issubclass(xmpeek.XmlParseError, xmpeek.XmpeekError)
    assert issubclass(xmpeek.PacketIOError, xmpeek.XmpeekError)
