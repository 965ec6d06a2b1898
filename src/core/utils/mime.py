from collections.abc import Mapping

from core.models.errors import MIMETypeError

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"BM": "image/bmp",
    b"\x00\x00\x01\x00": "image/x-icon",
    b"\x00\x00\x02\x00": "image/x-icon",
}

# RIFF containers are only images when the form type is WEBP
RIFF_SIGNATURE = b"RIFF"
WEBP_FORM_TYPE = b"WEBP"


def detect_mime_type(file_data: bytes) -> str:
    if file_data.startswith(RIFF_SIGNATURE) and file_data[8:12] == WEBP_FORM_TYPE:
        return "image/webp"

    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    raise MIMETypeError(
        message="Unsupported or unknown file type",
        details={"size": len(file_data)},
    )
