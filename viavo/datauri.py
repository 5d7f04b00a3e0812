import base64
import binascii


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def split_data_uri(uri: str | None) -> tuple[str, bytes]:
    """Return (mime_type, raw bytes). Bare base64 without a header is treated as JPEG."""
    if not uri:
        raise ValueError("empty image data")
    header, sep, payload = uri.partition(",")
    if not sep:
        header, payload = "", uri
    mime_type = "image/jpeg"
    if header.startswith("data:"):
        mime_type = header[len("data:"):].split(";", 1)[0] or mime_type
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"malformed base64 image data: {e}") from e
    if not data:
        raise ValueError("empty image data")
    return mime_type, data
