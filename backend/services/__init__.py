"""
Services module for NWN2 reference tables
Resource fetching, string resolution, table loading and CSV export
"""

from .string_resolver import StringRefResolver, ResolverState, CUSTOM_TLK_OFFSET
from .table_loader import ReferenceTableLoader, TableLoadResult
from .csv_export import to_csv, export_csv

__all__ = [
    'StringRefResolver', 'ResolverState', 'CUSTOM_TLK_OFFSET',
    'ReferenceTableLoader', 'TableLoadResult',
    'to_csv', 'export_csv',
]
