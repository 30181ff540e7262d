"""
CSV export of decoded tables

The output mirrors the reference viewer's export: header line of column
names, the ID column read from the ``id`` field, empty fields for missing or
falsy values, and quoting only when a value contains a comma or a quote.
"""
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from parsers.tda import ID_COLUMN, ID_FIELD, TableData, format_number


def escape_csv_value(value) -> str:
    if not value:
        return ''
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)

    text = str(value)
    if ',' in text or '"' in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(table: TableData, name: str = '') -> str:
    """Render a table as CSV text"""
    lines = [','.join(table.columns)]
    for row in table.rows:
        fields = []
        for column in table.columns:
            key = ID_FIELD if column == ID_COLUMN else column
            fields.append(escape_csv_value(row.get(key)))
        lines.append(','.join(fields))

    if name:
        logger.debug(f"Rendered {name} as CSV: {len(table.rows)} rows")
    return '\n'.join(lines)


def export_csv(table: TableData, name: str,
               output_dir: Optional[Union[str, Path]] = None) -> Path:
    """Write ``<name>.csv`` into output_dir (defaults to the configured export folder)"""
    if output_dir is None:
        from config.settings import settings
        output_dir = settings.resolved_export_dir()

    output_path = Path(output_dir) / f"{name}.csv"
    output_path.write_text(to_csv(table, name), encoding='utf-8')
    logger.info(f"Exported {name} to {output_path}")
    return output_path
