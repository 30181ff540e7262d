"""
String reference resolver

Resolves TLK string references found in 2DA columns. Two independent tables
are loaded once: the standard dialog table and the module's custom table.
References at or above CUSTOM_TLK_OFFSET address the custom table.

Initialization runs at most once per resolver. Concurrent callers share the
same in-flight load, and a failed load leaves both tables empty for the rest
of the resolver's life so every reference falls back to its numeral.
"""
import asyncio
from enum import Enum
from typing import Dict, Iterable, Optional, Union

from loguru import logger

from parsers.tda import format_number
from parsers.tlk import StringTable, read_tlk_entries

CUSTOM_TLK_OFFSET = 16_777_216

StrRef = Union[int, float, str]


class ResolverState(str, Enum):
    UNINITIALIZED = 'uninitialized'
    LOADING = 'loading'
    READY = 'ready'
    READY_WITH_FALLBACK = 'ready_with_fallback'


SETTLED_STATES = (ResolverState.READY, ResolverState.READY_WITH_FALLBACK)


def _ref_text(ref: StrRef) -> str:
    if isinstance(ref, (int, float)) and not isinstance(ref, bool):
        return format_number(ref)
    return str(ref)


def parse_str_ref(ref: StrRef) -> Optional[int]:
    """Parse a reference to a non-negative integer, or None if it is not one"""
    if isinstance(ref, bool):
        return None
    if isinstance(ref, int):
        return ref if ref >= 0 else None
    if isinstance(ref, float):
        return int(ref) if ref.is_integer() and ref >= 0 else None
    if isinstance(ref, str):
        text = ref.strip()
        if text.isascii() and text.isdigit():
            return int(text)
    return None


class StringRefResolver:
    """
    Resolve string references against the standard and custom TLK tables.

    Args:
        fetcher: Async fetch collaborator providing raw TLK payloads by name
        standard_name: Resource name of the standard table (dialog.tlk)
        custom_name: Resource name of the custom table
    """

    def __init__(self, fetcher, standard_name: str = 'dialog.tlk',
                 custom_name: str = 'custom.tlk'):
        self.fetcher = fetcher
        self.standard_name = standard_name
        self.custom_name = custom_name

        self._state = ResolverState.UNINITIALIZED
        self._standard = StringTable.empty()
        self._custom = StringTable.empty()
        self._pending: Optional[asyncio.Future] = None
        self.error: Optional[str] = None

    @property
    def state(self) -> ResolverState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state in SETTLED_STATES

    async def initialize(self) -> ResolverState:
        """Load both tables once. Safe to call from any number of tasks."""
        if self.is_ready:
            return self._state

        if self._pending is None:
            self._state = ResolverState.LOADING
            self._pending = asyncio.ensure_future(self._load())

        # Shielded so a cancelled caller never aborts the shared load
        await asyncio.shield(self._pending)
        return self._state

    async def _load(self) -> None:
        logger.info(f"Loading string tables: {self.standard_name}, {self.custom_name}")
        try:
            standard_data, custom_data = await asyncio.gather(
                self.fetcher.fetch(self.standard_name),
                self.fetcher.fetch(self.custom_name),
            )
            standard = StringTable(read_tlk_entries(standard_data))
            custom = StringTable(read_tlk_entries(custom_data))
        except Exception as e:
            logger.error(f"Failed to load string tables, references will stay numeric: {e}")
            self.error = str(e)
            self._standard = StringTable.empty()
            self._custom = StringTable.empty()
            self._state = ResolverState.READY_WITH_FALLBACK
            return

        self._standard = standard
        self._custom = custom
        self._state = ResolverState.READY
        logger.info(f"String tables ready: {len(standard)} standard, {len(custom)} custom")

    def lookup(self, ref: StrRef) -> Optional[str]:
        """Return the text for a reference, or None when it does not resolve"""
        if not self.is_ready:
            return None

        str_id = parse_str_ref(ref)
        if str_id is None:
            return None

        if str_id >= CUSTOM_TLK_OFFSET:
            return self._custom.get(str_id - CUSTOM_TLK_OFFSET)
        return self._standard.get(str_id)

    def resolve(self, ref: StrRef) -> str:
        """Resolve a reference to display text, falling back to the numeral"""
        text = self.lookup(ref)
        if text is None:
            return _ref_text(ref)
        return text

    def resolve_many(self, refs: Iterable[StrRef]) -> Dict[StrRef, str]:
        return {ref: self.resolve(ref) for ref in refs}

    def table_sizes(self) -> Dict[str, int]:
        return {'standard': len(self._standard), 'custom': len(self._custom)}
