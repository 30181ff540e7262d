"""
TLK string tables

A StringTable is the read-only id -> text mapping behind string-reference
resolution. Tables are built from (id, text) entries, which come either from
a binary TLK V3.0 file or from a JSON export of one.
"""
import json
import logging
import struct
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, List, Tuple

logger = logging.getLogger(__name__)

TLK_SIGNATURE = b'TLK '
TLK_VERSION = b'V3.0'
HEADER_SIZE = 20
ENTRY_SIZE = 40
FLAG_TEXT_PRESENT = 0x01

# signature, version, language id, string count, string data offset
_HEADER_STRUCT = struct.Struct('<4s4sIII')
# flags, sound resref, volume variance, pitch variance, offset, size, sound length
_ENTRY_STRUCT = struct.Struct('<I16sIIIIf')

TLKEntry = Tuple[int, str]


class TLKFormatError(ValueError):
    """Raised when a TLK payload cannot be read"""
    pass


class StringTable(Mapping):
    """Immutable id -> text table. Later duplicate ids win."""

    def __init__(self, entries: Iterable[TLKEntry] = ()):
        strings: Dict[int, str] = {}
        for str_id, text in entries:
            strings[int(str_id)] = text
        self._strings = strings

    def __getitem__(self, str_id: int) -> str:
        return self._strings[str_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._strings)

    def __len__(self) -> int:
        return len(self._strings)

    def __repr__(self) -> str:
        return f"StringTable({len(self._strings)} strings)"

    @classmethod
    def empty(cls) -> 'StringTable':
        return cls()

    @classmethod
    def from_bytes(cls, data: bytes) -> 'StringTable':
        return cls(read_tlk_entries(data))


def read_binary_tlk(data: bytes) -> List[TLKEntry]:
    """
    Read entries from a binary TLK V3.0 file.

    Only entries flagged as carrying text are returned; ids are the entry
    positions in the string table.
    """
    if len(data) < HEADER_SIZE:
        raise TLKFormatError(f"TLK header too short: {len(data)} bytes")

    signature, version, language_id, string_count, data_offset = _HEADER_STRUCT.unpack_from(data, 0)
    if signature != TLK_SIGNATURE or version != TLK_VERSION:
        raise TLKFormatError(f"Invalid TLK file: {signature!r} {version!r}")

    table_end = HEADER_SIZE + string_count * ENTRY_SIZE
    if len(data) < table_end:
        raise TLKFormatError(f"TLK string table truncated: expected {string_count} entries")

    entries = []
    for index in range(string_count):
        flags, _resref, _volume, _pitch, offset, size, _length = _ENTRY_STRUCT.unpack_from(
            data, HEADER_SIZE + index * ENTRY_SIZE
        )
        if not flags & FLAG_TEXT_PRESENT:
            continue

        start = data_offset + offset
        end = start + size
        if end > len(data):
            raise TLKFormatError(f"TLK string {index} points past end of file")
        entries.append((index, data[start:end].decode('utf-8', errors='replace')))

    logger.debug(f"Read {len(entries)} strings from TLK (language {language_id})")
    return entries


def read_json_entries(payload: Any) -> List[TLKEntry]:
    """
    Read entries from a decoded JSON payload.

    Accepted shapes: a list of ``[id, text]`` pairs, a list of
    ``{"id": ..., "text": ...}`` objects, or an object mapping ids to text.
    """
    if isinstance(payload, dict) and 'entries' in payload:
        payload = payload['entries']

    if isinstance(payload, dict):
        items = list(payload.items())
    elif isinstance(payload, list):
        items = []
        for item in payload:
            if isinstance(item, dict):
                items.append((item.get('id'), item.get('text')))
            elif isinstance(item, (list, tuple)) and len(item) == 2:
                items.append((item[0], item[1]))
            else:
                raise TLKFormatError(f"Unsupported TLK entry: {item!r}")
    else:
        raise TLKFormatError(f"Unsupported TLK payload type: {type(payload).__name__}")

    entries = []
    for str_id, text in items:
        try:
            parsed_id = int(str_id)
        except (TypeError, ValueError):
            raise TLKFormatError(f"Invalid TLK entry id: {str_id!r}")
        if parsed_id < 0 or not isinstance(text, str):
            raise TLKFormatError(f"Invalid TLK entry: {str_id!r}")
        entries.append((parsed_id, text))
    return entries


def read_tlk_entries(data: bytes) -> List[TLKEntry]:
    """Read entries from raw resource bytes, binary or JSON"""
    if data.startswith(TLK_SIGNATURE):
        return read_binary_tlk(data)

    try:
        payload = json.loads(data.decode('utf-8-sig'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TLKFormatError(f"TLK payload is neither binary TLK nor JSON: {e}")
    return read_json_entries(payload)
