"""
Pydantic models for reference table operations
Handles decoded 2DA tables, table kind configuration and TLK string lookups
"""

from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field


class TableKindInfo(BaseModel):
    """Column roles for a kind of reference table"""
    kind: str = Field(..., description="Table kind key (appearance, feats, spells, placeables)")
    label: str = Field(..., description="Display label")
    description: str = Field("", description="Short description of the table")
    filename: str = Field(..., description="Default 2DA resource name")
    reference_columns: List[str] = Field(default_factory=list, description="Columns resolved through TLK")
    hidden_columns: List[str] = Field(default_factory=list, description="Columns hidden by default")
    column_order: List[str] = Field(default_factory=list, description="Preferred leading columns")
    description_columns: List[str] = Field(default_factory=list, description="Long text columns")


class DecodeStatsInfo(BaseModel):
    """Row counters from decoding"""
    processed: int = Field(0, description="Data lines examined")
    kept: int = Field(0, description="Rows kept")
    skipped: int = Field(0, description="Rows dropped (bad ID or deleted)")


class TableResponse(BaseModel):
    """Decoded 2DA table"""
    name: str = Field(..., description="Resource name")
    kind: TableKindInfo
    columns: List[str] = Field(default_factory=list, description="Column names, ID first")
    rows: List[Dict[str, Union[int, float, str]]] = Field(default_factory=list)
    row_count: int = Field(0, description="Number of rows")
    stats: DecodeStatsInfo = Field(default_factory=DecodeStatsInfo)


class TableKindsResponse(BaseModel):
    """All configured table kinds"""
    kinds: List[TableKindInfo]


class StringRefResponse(BaseModel):
    """Resolved TLK string reference"""
    ref: str = Field(..., description="Reference as requested")
    text: str = Field(..., description="Resolved text, or the numeral when unresolved")
    resolved: bool = Field(False, description="Whether the reference was found in a table")
    state: str = Field(..., description="Resolver state")


class ResolverStatusResponse(BaseModel):
    """String resolver status"""
    state: str
    standard_tlk: str
    custom_tlk: str
    standard_count: int = 0
    custom_count: int = 0
    error: Optional[str] = None
