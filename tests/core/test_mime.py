import pytest

from core.models.errors import MIMETypeError
from core.utils.mime import detect_mime_type


@pytest.mark.parametrize(
    "data,expected",
    [
        (b"\xff\xd8\xff\xe0rest-of-jpeg", "image/jpeg"),
        (b"\x89PNG\r\n\x1a\nrest-of-png", "image/png"),
        (b"GIF87a-data", "image/gif"),
        (b"GIF89a-data", "image/gif"),
        (b"BM\x00\x00", "image/bmp"),
        (b"\x00\x00\x01\x00\x01\x00", "image/x-icon"),
        (b"RIFF\x24\x00\x00\x00WEBPVP8 ", "image/webp"),
    ],
)
def test_detect_mime_type(data: bytes, expected: str) -> None:
    assert detect_mime_type(data) == expected


def test_detect_mime_type_jpeg_fixture(sample_jpeg_binary: bytes) -> None:
    assert detect_mime_type(sample_jpeg_binary) == "image/jpeg"


def test_riff_container_that_is_not_webp_is_rejected() -> None:
    with pytest.raises(MIMETypeError):
        detect_mime_type(b"RIFF\x24\x00\x00\x00WAVEfmt ")


@pytest.mark.parametrize("data", [b"", b"%PDF-1.7", b"plain text", b"\x00\x01\x02"])
def test_unknown_type_raises(data: bytes) -> None:
    with pytest.raises(MIMETypeError) as exc_info:
        detect_mime_type(data)

    assert exc_info.value.details == {"size": len(data)}
