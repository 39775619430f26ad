"""Base64 handling for uploaded and downloaded files.

Agents send file contents in many base64 flavours: plain, wrapped in a data URL,
broken into lines, or in the URL-safe alphabet without padding (common for images
forwarded from chat apps). Everything is normalized to standard base64 first.
"""

import base64
import binascii
import re

from shared.clients.errors import InvalidInputError

DATA_URL_MARKER = "base64,"
_WHITESPACE_REGEX = re.compile(r"\s+")
_BASE64_REGEX = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")

INVALID_BASE64_MESSAGE = "Invalid base64-encoded file data"


def normalize_base64(text: str) -> str:
    """
    Strip a data URL prefix and whitespace, translate the URL-safe alphabet and pad.

    Args:
        text (str): The raw payload.

    Returns:
        str: The payload in standard, padded base64.
    """
    marker_index = text.find(DATA_URL_MARKER)
    if marker_index != -1:
        text = text[marker_index + len(DATA_URL_MARKER):]
    text = _WHITESPACE_REGEX.sub("", text)
    text = text.replace("-", "+").replace("_", "/")
    missing_padding = -len(text) % 4
    return text + "=" * missing_padding


def decode_base64_file(text: str) -> bytes:
    """
    Decode a base64 file payload into raw bytes.

    Args:
        text (str): Plain, data URL, whitespace-wrapped or URL-safe base64.

    Returns:
        bytes: The decoded file content.

    Raises:
        InvalidInputError: If the payload is not valid base64 after normalization.
    """
    normalized = normalize_base64(text)
    if not _BASE64_REGEX.match(normalized) or len(normalized) % 4 != 0:
        raise InvalidInputError(f"{INVALID_BASE64_MESSAGE}: the payload contains characters outside the base64 alphabet or is malformed.")
    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInputError(f"{INVALID_BASE64_MESSAGE}: {e}") from e


def encode_base64_file(content: bytes) -> str:
    """
    Encode raw bytes as standard, padded base64.
    """
    return base64.b64encode(content).decode("ascii")
