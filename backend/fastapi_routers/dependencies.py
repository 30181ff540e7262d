"""
Lightweight FastAPI dependencies over the shared services registry
"""

from typing import Annotated, TYPE_CHECKING
from fastapi import Depends, HTTPException, status
from loguru import logger

from services.shared_services import get_shared_string_resolver, get_shared_table_loader

# Type-only imports
if TYPE_CHECKING:
    from services.string_resolver import StringRefResolver
    from services.table_loader import ReferenceTableLoader


def get_table_loader() -> "ReferenceTableLoader":
    """
    Get the shared table loader

    Raises:
        HTTPException: 503 if the server has not registered one yet
    """
    loader = get_shared_table_loader()
    if loader is None:
        logger.info("Table request before services were registered")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Reference table services are not ready"
        )
    return loader


def get_string_resolver() -> "StringRefResolver":
    resolver = get_shared_string_resolver()
    if resolver is None:
        logger.info("String lookup before services were registered")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="String resolver is not ready"
        )
    return resolver


TableLoaderDep = Annotated["ReferenceTableLoader", Depends(get_table_loader)]
StringResolverDep = Annotated["StringRefResolver", Depends(get_string_resolver)]
