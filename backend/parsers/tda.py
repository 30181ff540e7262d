"""
2DA V2.0 decoder

Turns raw 2DA text into a TableData: the implicit ID column followed by the
header columns, and one row dict per surviving data line. String-reference
columns are resolved through an injected resolver while rows are decoded.

The decoder never raises on malformed content. Bad rows are skipped and
counted, odd values are kept as literal text.
"""
import logging
import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

FORMAT_MARKER = '2DA V2.0'
EMPTY_VALUE = '****'
ID_COLUMN = 'ID'
ID_FIELD = 'id'

# Columns holding TLK string references in the stock NWN2 tables
DEFAULT_REFERENCE_COLUMNS = frozenset({
    'Name', 'SpellDesc', 'FEAT', 'DESCRIPTION', 'STRING_REF',
    'NAME', 'AltMessage', 'Label', 'StrRef',
})

_ROW_ID_RE = re.compile(r'-?[0-9]+')
_NUMERIC_RE = re.compile(r'-?[0-9]+(?:\.[0-9]+)?')
_DIGITS_RE = re.compile(r'[0-9]+')

CellValue = Union[int, float, str]
TableRow = Dict[str, CellValue]


@dataclass
class DecodeStats:
    """Row counters collected while decoding one resource"""
    processed: int = 0
    kept: int = 0
    skipped: int = 0


@dataclass
class TableData:
    """Decoded 2DA table: ordered columns plus rows keyed by column name"""
    columns: List[str] = field(default_factory=list)
    rows: List[TableRow] = field(default_factory=list)
    stats: DecodeStats = field(default_factory=DecodeStats)

    @property
    def is_empty(self) -> bool:
        return not self.columns and not self.rows

    def get_row(self, row_id: int) -> Optional[TableRow]:
        """Find a row by its ID value (not its position)"""
        for row in self.rows:
            if row[ID_FIELD] == row_id:
                return row
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {'columns': list(self.columns), 'rows': [dict(row) for row in self.rows]}


def format_number(value: Union[int, float]) -> str:
    """
    Render a number in its shortest decimal form, the way the reference
    viewer prints numbers: 12.0 -> '12', 1e-07 -> '1e-7', 1e21 -> '1e+21'.

    Plain notation is used for magnitudes in [1e-6, 1e21), exponent notation
    outside that range.
    """
    if not isinstance(value, float):
        return str(value)
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if value == 0:
        return '0'

    sign = '-' if value < 0 else ''
    # repr gives the shortest round-tripping digits
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = ''.join(str(d) for d in digit_tuple)
    k = len(digits)
    n = k + exponent  # decimal point position relative to the digits

    if k <= n <= 21:
        text = digits + '0' * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + '.' + digits[n:]
    elif -6 < n <= 0:
        text = '0.' + '0' * -n + digits
    else:
        power = n - 1
        mantissa = digits if k == 1 else digits[0] + '.' + digits[1:]
        text = f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"
    return sign + text


def tokenize_line(line: str) -> List[str]:
    """
    Split one 2DA data line into tokens.

    Double quotes toggle a quoted span and stay part of the token. Outside a
    quoted span one or more spaces end the current token. Empty tokens are
    never emitted.
    """
    tokens = []
    current = []
    in_quotes = False

    for char in line.lstrip(' '):
        if char == '"':
            in_quotes = not in_quotes
            current.append(char)
        elif char == ' ' and not in_quotes:
            if current:
                tokens.append(''.join(current))
                current = []
        else:
            current.append(char)

    if current:
        tokens.append(''.join(current))
    return tokens


def strip_quotes(value: str) -> str:
    if len(value) > 1 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def assemble_table(header_columns: List[str], rows: List[TableRow],
                   stats: Optional[DecodeStats] = None) -> TableData:
    """Build the final table with the implicit ID column first"""
    columns = [ID_COLUMN] + list(header_columns)
    return TableData(columns=columns, rows=rows, stats=stats or DecodeStats())


class TDADecoder:
    """
    Decoder for 2DA V2.0 text.

    Args:
        resolver: Object with a ``resolve(value) -> str`` method used for
            string-reference columns. Without one, reference columns decode
            like any other column.
        reference_columns: Column names (case-sensitive) whose all-digit
            values are string references.
    """

    def __init__(self, resolver=None, reference_columns: Optional[Iterable[str]] = None):
        self.resolver = resolver
        if reference_columns is None:
            self.reference_columns = DEFAULT_REFERENCE_COLUMNS
        else:
            self.reference_columns = frozenset(reference_columns)

    def decode(self, text: str) -> TableData:
        lines = []
        for raw_line in text.split('\n'):
            line = raw_line.strip()
            if not line or line == FORMAT_MARKER:
                continue
            lines.append(line)

        if not lines:
            logger.debug("No header line found in 2DA content")
            return TableData()

        header_columns = lines[0].split()
        stats = DecodeStats()
        rows = []

        for line in lines[1:]:
            stats.processed += 1
            row = self._decode_row(line, header_columns)
            if row is None:
                stats.skipped += 1
                continue
            rows.append(row)

        stats.kept = len(rows)
        logger.debug(f"Decoded 2DA: {stats.kept} rows kept, {stats.skipped} skipped, "
                     f"{stats.processed} processed")
        return assemble_table(header_columns, rows, stats)

    def decode_bytes(self, data: bytes) -> TableData:
        try:
            text = data.decode('utf-8')
        except UnicodeDecodeError:
            # Older tables are saved in the Windows code page
            text = data.decode('cp1252', errors='replace')
        return self.decode(text)

    def read(self, path: Union[str, Path]) -> TableData:
        """Decode a 2DA file from disk. Missing files raise FileNotFoundError."""
        return self.decode_bytes(Path(path).read_bytes())

    def _decode_row(self, line: str, header_columns: List[str]) -> Optional[TableRow]:
        tokens = tokenize_line(line)
        if not tokens or not _ROW_ID_RE.fullmatch(tokens[0]):
            return None

        row_id = int(tokens[0])

        # A **** label marks a deleted row
        if len(tokens) > 1 and tokens[1].replace('"', '') == EMPTY_VALUE:
            logger.debug(f"Skipping deleted row {row_id}")
            return None

        row: TableRow = {ID_FIELD: row_id}
        for column, token in zip(header_columns, tokens[1:]):
            # The row ID always wins over a header column that is also named id
            if column == ID_FIELD:
                continue
            row[column] = self._decode_value(column, token)
        return row

    def _decode_value(self, column: str, token: str) -> CellValue:
        value = strip_quotes(token)
        if value == EMPTY_VALUE:
            return ''

        if (self.resolver is not None and column in self.reference_columns
                and _DIGITS_RE.fullmatch(value)):
            return self.resolver.resolve(value)

        if _NUMERIC_RE.fullmatch(value):
            return float(value)
        return value


def decode(text: str, resolver=None,
           reference_columns: Optional[Iterable[str]] = None) -> TableData:
    """Decode 2DA text into a TableData"""
    return TDADecoder(resolver=resolver, reference_columns=reference_columns).decode(text)
