"""
Shared Services Registry

Process-wide registry for the services every table load shares: the string
resolver and the table loader. The FastAPI lifespan registers them at
startup; routers read them from here.
"""

from typing import Optional, Any, Dict

from loguru import logger

# Populated by the FastAPI lifespan at startup
_shared_registry: Dict[str, Any] = {}

STRING_RESOLVER = 'string_resolver'
TABLE_LOADER = 'table_loader'


def register_shared_service(name: str, service: Any) -> None:
    """
    Register a shared service.

    Args:
        name: Service name (e.g., 'string_resolver', 'table_loader')
        service: Service instance
    """
    _shared_registry[name] = service
    logger.debug(f"Registered shared service: {name}")


def get_shared_service(name: str) -> Optional[Any]:
    return _shared_registry.get(name)


def get_shared_string_resolver():
    """Get the shared StringRefResolver, or None before startup"""
    return get_shared_service(STRING_RESOLVER)


def get_shared_table_loader():
    """Get the shared ReferenceTableLoader, or None before startup"""
    return get_shared_service(TABLE_LOADER)


def clear_shared_services() -> None:
    """Clear all shared services (useful for testing)."""
    _shared_registry.clear()
    logger.debug("Cleared all shared services")


def list_shared_services() -> Dict[str, str]:
    """
    List all registered shared services.

    Returns:
        Dict mapping service names to their type names
    """
    return {name: type(service).__name__ for name, service in _shared_registry.items()}
