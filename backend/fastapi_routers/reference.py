"""
Reference tables router - decoded 2DA tables, CSV export and TLK string lookups
Read-only: presentation layers consume these, nothing flows back into the decoder
"""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response
from loguru import logger

from config.table_kinds import TABLE_KINDS
from fastapi_models.reference_models import (
    DecodeStatsInfo,
    ResolverStatusResponse,
    StringRefResponse,
    TableKindInfo,
    TableKindsResponse,
    TableResponse,
)
from fastapi_routers.dependencies import StringResolverDep, TableLoaderDep
from services.csv_export import to_csv
from services.table_loader import ReferenceTableLoader, TableLoadResult

router = APIRouter()


async def _load_or_404(loader: ReferenceTableLoader, name: str) -> TableLoadResult:
    result = await loader.load_result(name)
    if not result.ok:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Failed to load {name}: {result.error}"
        )
    return result


@router.get("/tables/{name}", response_model=TableResponse)
async def get_table(name: str, loader: TableLoaderDep):
    """Decode a 2DA resource with its string references resolved"""
    result = await _load_or_404(loader, name)
    data = result.data
    return TableResponse(
        name=name,
        kind=TableKindInfo(**result.kind.to_dict()),
        columns=data.columns,
        rows=data.rows,
        row_count=len(data.rows),
        stats=DecodeStatsInfo(
            processed=data.stats.processed,
            kept=data.stats.kept,
            skipped=data.stats.skipped
        )
    )


@router.get("/tables/{name}/csv")
async def export_table_csv(name: str, loader: TableLoaderDep):
    """Export a decoded table as a CSV attachment"""
    result = await _load_or_404(loader, name)
    export_name = name.rsplit('.', 1)[0]
    logger.info(f"CSV export requested for {name}")
    return Response(
        content=to_csv(result.data, export_name).encode('utf-8'),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_name}.csv"'}
    )


@router.get("/table-kinds", response_model=TableKindsResponse)
def get_table_kinds():
    """List the configured table kinds and their column roles"""
    return TableKindsResponse(
        kinds=[TableKindInfo(**config.to_dict()) for config in TABLE_KINDS.values()]
    )


@router.get("/strings", response_model=ResolverStatusResponse)
def get_resolver_status(resolver: StringResolverDep):
    """Report the string resolver's lifecycle state and table sizes"""
    sizes = resolver.table_sizes()
    return ResolverStatusResponse(
        state=resolver.state.value,
        standard_tlk=resolver.standard_name,
        custom_tlk=resolver.custom_name,
        standard_count=sizes['standard'],
        custom_count=sizes['custom'],
        error=resolver.error
    )


@router.get("/strings/{ref}", response_model=StringRefResponse)
async def resolve_string(ref: str, resolver: StringResolverDep):
    """Resolve one string reference (ids from 16777216 up address the custom table)"""
    await resolver.initialize()
    text = resolver.lookup(ref)
    return StringRefResponse(
        ref=ref,
        text=text if text is not None else resolver.resolve(ref),
        resolved=text is not None,
        state=resolver.state.value
    )
