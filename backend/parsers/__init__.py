"""
NWN2 reference data parsers
"""

from .tda import (
    TDADecoder, TableData, TableRow, DecodeStats,
    decode, tokenize_line, assemble_table, format_number,
    DEFAULT_REFERENCE_COLUMNS
)
from .tlk import (
    StringTable, TLKFormatError,
    read_tlk_entries, read_binary_tlk, read_json_entries
)

__all__ = [
    # 2DA
    'TDADecoder', 'TableData', 'TableRow', 'DecodeStats',
    'decode', 'tokenize_line', 'assemble_table', 'format_number',
    'DEFAULT_REFERENCE_COLUMNS',

    # TLK
    'StringTable', 'TLKFormatError',
    'read_tlk_entries', 'read_binary_tlk', 'read_json_entries',
]
