"""
FastAPI Pydantic models for the reference table API
"""

from .reference_models import (
    TableKindInfo,
    DecodeStatsInfo,
    TableResponse,
    TableKindsResponse,
    StringRefResponse,
    ResolverStatusResponse,
)

__all__ = [
    'TableKindInfo',
    'DecodeStatsInfo',
    'TableResponse',
    'TableKindsResponse',
    'StringRefResponse',
    'ResolverStatusResponse',
]
