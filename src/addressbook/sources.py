"""Reading input documents and writing converted output."""

import codecs
import mimetypes
import os
import re
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, urlparse

import requests

from .exceptions import InputUnavailableError, OutputNotWritableError, UnsupportedMimeTypeError
from .logger import LogLevel, create_logger
from .model import AddressInput, InputType


URL_SCHEMES = {"http", "https"}

# Declared content types accepted for URL input
URL_CONTENT_TYPES = {
    "application/json": InputType.JSON,
    "application/xml": InputType.XML,
}

mimetypes.add_type("application/json", ".json")
mimetypes.add_type("application/xml", ".xml")

_XML_ENCODING = re.compile(rb'^\s*<\?xml[^>]*?encoding\s*=\s*["\']([A-Za-z][A-Za-z0-9._\-]*)["\']')


def is_url(source: str) -> bool:
    """Whether the input should be fetched over HTTP."""
    parsed = urlparse(source)
    return parsed.scheme.lower() in URL_SCHEMES and bool(parsed.netloc)


def file_url_path(source: str) -> Optional[Path]:
    """Local path for a file:// URL, None for anything else."""
    parsed = urlparse(source)
    if parsed.scheme.lower() != "file":
        return None
    return Path(unquote(parsed.path))


def media_type(content_type: Optional[str]) -> Optional[str]:
    """Bare media type of a Content-Type value, parameters removed."""
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower() or None


def probe_file_type(path: Path) -> InputType:
    """Detect whether a local file holds JSON or XML."""
    mime_type, _ = mimetypes.guess_type(path.name)
    subtype = mime_type.split("/", 1)[1] if mime_type else ""
    if subtype == "json" or subtype.endswith("+json"):
        return InputType.JSON
    if subtype == "xml" or subtype.endswith("+xml"):
        return InputType.XML
    raise UnsupportedMimeTypeError(mime_type, str(path))


def content_charset(content_type: Optional[str]) -> Optional[str]:
    """The charset parameter of a Content-Type value, if any."""
    if not content_type:
        return None
    for param in content_type.split(";")[1:]:
        name, _, value = param.partition("=")
        if name.strip().lower() == "charset":
            return value.strip().strip("\"'") or None
    return None


def decode_content(data: bytes, input_type: InputType, charset: Optional[str] = None) -> str:
    """Decode a document, honouring a declared charset, a BOM or the XML declaration.

    Falls back to UTF-8 when nothing names an encoding.
    """
    encoding = charset
    if encoding is None:
        if data.startswith(codecs.BOM_UTF8):
            encoding = "utf-8-sig"
        elif data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
            encoding = "utf-16"
        elif input_type is InputType.XML:
            match = _XML_ENCODING.match(data)
            if match:
                encoding = match.group(1).decode("ascii")
    encoding = encoding or "utf-8"

    try:
        text = data.decode(encoding)
    except LookupError as e:
        raise InputUnavailableError(f"Unknown character encoding {encoding!r}") from e
    except UnicodeDecodeError as e:
        raise InputUnavailableError(f"Input is not valid {encoding}: {e}") from e
    return text.lstrip("\ufeff")


def read_url(url: str, timeout: float = 30.0, log_level: LogLevel = LogLevel.WARN,
             log_format: str = "json") -> AddressInput:
    """Fetch a document over HTTP, typed by its declared content type."""
    logger = create_logger(level=log_level, component="sources", fmt=log_format)
    logger.info("Fetching input", sourceURI=url, timeout=timeout)

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout as e:
        raise InputUnavailableError(f"Timed out after {timeout}s fetching {url}") from e
    except requests.RequestException as e:
        raise InputUnavailableError(f"Cannot fetch {url}: {e}") from e

    content_type = response.headers.get("Content-Type")
    declared = media_type(content_type)
    input_type = URL_CONTENT_TYPES.get(declared)
    if input_type is None:
        raise UnsupportedMimeTypeError(declared, url)

    charset = content_charset(content_type)
    logger.debug("Fetched input", sourceURI=url, contentType=declared, charset=charset,
                 status=response.status_code)
    return AddressInput(input_type, decode_content(response.content, input_type, charset), url)


def read_file(path: Union[str, Path], log_level: LogLevel = LogLevel.WARN,
              log_format: str = "json") -> AddressInput:
    """Read a local document, typed by probing its file name."""
    logger = create_logger(level=log_level, component="sources", fmt=log_format)
    path = Path(path)

    if not path.is_file():
        raise InputUnavailableError(f"{path} does not exist or is not a file")

    input_type = probe_file_type(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InputUnavailableError(f"Cannot read {path}: {e}") from e
    content = decode_content(data, input_type)

    logger.debug("Read input file", sourceURI=str(path), inputType=input_type.value, size=len(content))
    return AddressInput(input_type, content, str(path))


def read_input(source: str, timeout: float = 30.0, log_level: LogLevel = LogLevel.WARN,
               log_format: str = "json") -> AddressInput:
    """Read input from a URL or a local path."""
    if is_url(source):
        return read_url(source, timeout=timeout, log_level=log_level, log_format=log_format)
    local = file_url_path(source)
    return read_file(local if local is not None else source, log_level=log_level, log_format=log_format)


def ensure_writable(path: Union[str, Path]) -> Path:
    """Check the destination can be written before any work is done."""
    destination = Path(path).absolute()
    parent = destination.parent

    if destination.is_dir():
        raise OutputNotWritableError(f"Output path {destination} is a directory")
    if not parent.is_dir():
        raise OutputNotWritableError(f"Output directory {parent} does not exist")
    if not os.access(parent, os.W_OK):
        raise OutputNotWritableError(f"Output directory {parent} is not writable")
    if destination.exists() and not os.access(destination, os.W_OK):
        raise OutputNotWritableError(f"Output path {destination} is not writable")

    return destination


def write_output(path: Union[str, Path], text: str) -> Path:
    """Write converted text to the destination in one call."""
    destination = ensure_writable(path)
    try:
        destination.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputNotWritableError(f"Cannot write {destination}: {e}") from e
    return destination
