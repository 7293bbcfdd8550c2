"""Incremental decoding of ``go ... -json`` output.

The go command writes a stream of concatenated, indented JSON objects rather
than JSON Lines, so objects are decoded with ``JSONDecoder.raw_decode`` from a
buffer that is refilled chunk by chunk. Every object is checked against a JSON
Schema before it is turned into a typed record; the first bad record stops the
stream.
"""

from __future__ import annotations

import codecs
import json
from collections.abc import Iterator
from typing import IO, Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from ..models import DownloadedModule, ModuleRecord

DEFAULT_CHUNK_SIZE = 64 * 1024

MODULE_LIST_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["Path"],
    "properties": {
        "Path": {"type": "string", "minLength": 1},
        "Version": {"type": "string"},
        "Main": {"type": "boolean"},
        "Replace": {
            "type": ["object", "null"],
            "required": ["Path"],
            "properties": {
                "Path": {"type": "string", "minLength": 1},
                "Version": {"type": "string"},
            },
        },
    },
}

DOWNLOAD_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["Path"],
    "properties": {
        "Path": {"type": "string", "minLength": 1},
        "Version": {"type": "string"},
        "Sum": {"type": "string"},
        "Error": {"type": "string"},
    },
}

_WHITESPACE = " \t\n\r"


class ModuleDecodeError(ValueError):
    """Raised when go command output is not a valid stream of records."""


def iter_json_objects(
    stream: IO[bytes], chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[dict[str, Any]]:
    """Yield each top-level JSON object read from ``stream``."""
    decoder = json.JSONDecoder()
    utf8 = codecs.getincrementaldecoder("utf-8")()
    buffer = ""
    index = 0
    eof = False

    while True:
        buffer = buffer.lstrip(_WHITESPACE)
        if not buffer:
            if eof:
                return
            chunk = stream.read(chunk_size)
            eof = not chunk
            try:
                buffer = utf8.decode(chunk, final=eof)
            except UnicodeDecodeError as exc:
                raise ModuleDecodeError(f"record {index}: invalid UTF-8 ({exc.reason})") from exc
            continue

        try:
            value, end = decoder.raw_decode(buffer)
        except json.JSONDecodeError as exc:
            if eof:
                raise ModuleDecodeError(f"record {index}: invalid JSON ({exc.msg})") from exc
            chunk = stream.read(chunk_size)
            eof = not chunk
            try:
                buffer += utf8.decode(chunk, final=eof)
            except UnicodeDecodeError as exc:
                raise ModuleDecodeError(f"record {index}: invalid UTF-8 ({exc.reason})") from exc
            continue

        # A number or literal may run into the next chunk; only objects are valid.
        if not isinstance(value, dict):
            raise ModuleDecodeError(f"record {index}: expected a JSON object")

        buffer = buffer[end:]
        yield value
        index += 1


def _check(validator: Draft202012Validator, record: dict[str, Any], index: int) -> None:
    error = best_match(validator.iter_errors(record))
    if error is not None:
        pointer = "/".join(str(p) for p in error.path)
        raise ModuleDecodeError(f"record {index}: {pointer or '<root>'}: {error.message}")


def decode_module_list(
    stream: IO[bytes], chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[ModuleRecord]:
    """Decode ``go list -m -json`` output into module records."""
    validator = Draft202012Validator(MODULE_LIST_SCHEMA)
    for index, record in enumerate(iter_json_objects(stream, chunk_size)):
        _check(validator, record, index)
        yield ModuleRecord.from_dict(record)


def decode_downloads(
    stream: IO[bytes], chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[DownloadedModule]:
    """Decode ``go mod download -json`` output into download records."""
    validator = Draft202012Validator(DOWNLOAD_SCHEMA)
    for index, record in enumerate(iter_json_objects(stream, chunk_size)):
        _check(validator, record, index)
        yield DownloadedModule.from_dict(record)
