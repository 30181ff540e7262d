"""
Reference table loading

Loads one named 2DA resource end to end: waits for the shared string
resolver to settle, fetches the raw text, then decodes it with the column
roles of the table's kind. Loading never raises; an unavailable resource
becomes an empty table and the fetch message is kept for display.
"""
from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from config.table_kinds import TableKindConfig, get_table_kind
from parsers.tda import TableData, TDADecoder
from services.resource_fetcher import ResourceUnavailableError
from services.string_resolver import StringRefResolver


@dataclass
class TableLoadResult:
    """Outcome of loading one resource"""
    name: str
    kind: TableKindConfig
    data: TableData
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReferenceTableLoader:
    """
    Load and decode reference tables by resource name.

    Args:
        fetcher: Async fetch collaborator for 2DA payloads
        resolver: Shared StringRefResolver used for reference columns
        kind_lookup: Maps a resource name to its TableKindConfig
    """

    def __init__(self, fetcher, resolver: StringRefResolver,
                 kind_lookup: Callable[[str], TableKindConfig] = get_table_kind):
        self.fetcher = fetcher
        self.resolver = resolver
        self.kind_lookup = kind_lookup

    async def load(self, name: str) -> TableData:
        result = await self.load_result(name)
        return result.data

    async def load_result(self, name: str) -> TableLoadResult:
        kind = self.kind_lookup(name)

        # Rows are only decoded once the string tables have settled
        await self.resolver.initialize()

        try:
            raw = await self.fetcher.fetch(name)
        except ResourceUnavailableError as e:
            logger.error(f"Error loading {name}: {e}")
            return TableLoadResult(name=name, kind=kind, data=TableData(), error=str(e))

        decoder = TDADecoder(resolver=self.resolver, reference_columns=kind.reference_columns)
        data = decoder.decode_bytes(raw)
        logger.info(f"Loaded {name} ({kind.kind}): {len(data.rows)} rows, "
                    f"{data.stats.skipped} skipped")
        return TableLoadResult(name=name, kind=kind, data=data)
