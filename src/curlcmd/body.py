"""Request body shapes and their encoding into a payload plus content-type."""
import collections.abc
import inspect
import json
import os
import secrets
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union
import httpx
from .errors import BodyEncodingError
from .utils import determine_content_type, has_json_structure

CRLF = b'\r\n'
DEFAULT_FILENAME = 'file'
DEFAULT_FILE_TYPE = 'application/octet-stream'


@dataclass(frozen=True)
class FormFile:
    """File-like value: raw bytes (or a readable object) with optional name and type."""
    data: Any
    filename: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(frozen=True)
class UrlEncodedBody:
    params: Any


@dataclass(frozen=True)
class MultipartBody:
    """Form fields in insertion order; values are text or FormFile."""
    fields: Any


@dataclass(frozen=True)
class BlobBody:
    data: Any
    content_type: Optional[str] = None


@dataclass(frozen=True)
class StreamBody:
    """A sync or async iterable of byte chunks, drained fully on encode."""
    stream: Any


@dataclass(frozen=True)
class BufferBody:
    buffer: Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class JsonBody:
    value: Any


@dataclass(frozen=True)
class TextBody:
    value: Any


Body = Union[UrlEncodedBody, MultipartBody, BlobBody, StreamBody, BufferBody, JsonBody, TextBody]
BODY_TYPES = (UrlEncodedBody, MultipartBody, BlobBody, StreamBody, BufferBody, JsonBody, TextBody)


@dataclass(frozen=True)
class EncodedBody:
    payload: Union[str, bytes]
    content_type: Optional[str] = None


def coerce_body(value: Any) -> Optional[Body]:
    """
    Map a plain Python value onto one of the body shapes.

    Returns None for "no body" (None or an empty string).
    """
    if value is None or (isinstance(value, str) and not value):
        return None
    if isinstance(value, BODY_TYPES):
        return value
    if isinstance(value, httpx.QueryParams):
        return UrlEncodedBody(value)
    if isinstance(value, FormFile):
        return BlobBody(value.data, value.content_type)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BufferBody(value)
    if isinstance(value, str):
        return TextBody(value)
    if has_json_structure(value):
        return JsonBody(value)
    if hasattr(value, 'read'):
        return BlobBody(value)
    if hasattr(value, '__aiter__') or isinstance(value, collections.abc.Iterator):
        return StreamBody(value)
    return TextBody(value)


async def _read_bytes(data: Any) -> bytes:
    """Read a blob-ish value (bytes-like, str, or object with read()) fully."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return data.encode('utf-8')
    read = getattr(data, 'read', None)
    if read is None:
        raise BodyEncodingError(f"Cannot read body data of type {type(data).__name__}")
    try:
        content = read()
        if inspect.isawaitable(content):
            content = await content
    except OSError as e:
        raise BodyEncodingError(f"Failed to read body data: {e}") from e
    if isinstance(content, str):
        return content.encode('utf-8')
    if not isinstance(content, (bytes, bytearray, memoryview)):
        raise BodyEncodingError(f"read() returned {type(content).__name__}, expected bytes")
    return bytes(content)


def _chunk_bytes(chunk: Any) -> bytes:
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return bytes(chunk)
    if isinstance(chunk, str):
        return chunk.encode('utf-8')
    raise BodyEncodingError(f"Stream yielded {type(chunk).__name__}, expected bytes")


async def drain_stream(stream: Any) -> bytes:
    """Collect every chunk of a sync or async iterable into one buffer."""
    chunks = []
    if hasattr(stream, '__aiter__'):
        async for chunk in stream:
            chunks.append(_chunk_bytes(chunk))
    elif isinstance(stream, collections.abc.Iterable):
        for chunk in stream:
            chunks.append(_chunk_bytes(chunk))
    else:
        raise BodyEncodingError(f"Cannot drain body stream of type {type(stream).__name__}")
    return b''.join(chunks)


def _form_items(fields: Any) -> list:
    # Multi-dicts (httpx.QueryParams) keep every value of a repeated name
    if hasattr(fields, "multi_items"):
        return list(fields.multi_items())
    if isinstance(fields, collections.abc.Mapping):
        return list(fields.items())
    try:
        return [(name, value) for name, value in fields]
    except (TypeError, ValueError) as e:
        raise BodyEncodingError(f"Multipart fields must be a mapping or (name, value) pairs: {e}") from e


def _file_name(fileobj: Any) -> Optional[str]:
    name = getattr(fileobj, 'name', None)
    if isinstance(name, str):
        return os.path.basename(name) or None
    return None


def make_boundary() -> str:
    return '----FormBoundary' + secrets.token_hex(16)


async def build_multipart_body(fields: Any, boundary: Optional[str] = None) -> tuple[bytes, str]:
    """
    Build a multipart/form-data payload.

    Parts are emitted in the fields' insertion order. File values carry a
    filename and Content-Type; everything else is written as UTF-8 text.

    Returns:
        Tuple of (payload_bytes, boundary)
    """
    if boundary is None:
        boundary = make_boundary()
    parts = []

    for name, value in _form_items(fields):
        head = f'--{boundary}\r\nContent-Disposition: form-data; name="{name}"'

        if hasattr(value, 'read'):
            value = FormFile(value, filename=_file_name(value))
        elif isinstance(value, (bytes, bytearray, memoryview)):
            value = FormFile(value)

        if isinstance(value, FormFile):
            filename = value.filename or DEFAULT_FILENAME
            file_type = value.content_type or DEFAULT_FILE_TYPE
            head += f'; filename="{filename}"\r\nContent-Type: {file_type}\r\n\r\n'
            content = await _read_bytes(value.data)
        elif isinstance(value, (str, int, float)):
            head += '\r\n\r\n'
            content = str(value).encode('utf-8')
        else:
            raise BodyEncodingError(f"Unsupported multipart value for field {name!r}: {type(value).__name__}")

        parts.append(head.encode('utf-8'))
        parts.append(content)
        parts.append(CRLF)

    parts.append(f'--{boundary}--\r\n'.encode('utf-8'))
    return b''.join(parts), boundary


async def encode_body(body: Body, classify: Callable[[str], str] = determine_content_type) -> EncodedBody:
    """
    Encode a body into its payload and implied content-type.

    Raises:
        BodyEncodingError: the body is not a known shape or cannot be read
    """
    if isinstance(body, UrlEncodedBody):
        try:
            query = httpx.QueryParams(body.params)
        except TypeError as e:
            raise BodyEncodingError(f"Invalid url-encoded parameters: {e}") from e
        return EncodedBody(str(query), 'application/x-www-form-urlencoded')

    if isinstance(body, MultipartBody):
        payload, boundary = await build_multipart_body(body.fields)
        return EncodedBody(payload, f'multipart/form-data; boundary={boundary}')

    if isinstance(body, BlobBody):
        return EncodedBody(await _read_bytes(body.data))

    if isinstance(body, StreamBody):
        return EncodedBody(await drain_stream(body.stream))

    if isinstance(body, BufferBody):
        if not isinstance(body.buffer, (bytes, bytearray, memoryview)):
            raise BodyEncodingError(f"Buffer body must be bytes-like, got {type(body.buffer).__name__}")
        return EncodedBody(bytes(body.buffer))

    if isinstance(body, JsonBody):
        try:
            text = json.dumps(body.value, separators=(',', ':'), ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise BodyEncodingError(f"Body is not JSON serializable: {e}") from e
        return EncodedBody(text, 'application/json')

    if isinstance(body, TextBody):
        text = str(body.value)
        return EncodedBody(text, classify(text))

    raise BodyEncodingError(f"Unsupported body type: {type(body).__name__}")
