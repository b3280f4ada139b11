"""
Factory that creates component loaders by source type
"""

import logging
from typing import Any, Dict, List

from migrationgraph.core.models import ValidationError
from migrationgraph.io.base import ComponentLoaderBase, SourceType

logger = logging.getLogger(__name__)

# Loader registry (populated when the loader modules are imported)
_LOADER_REGISTRY: Dict[SourceType, type] = {}

_MODULE_MAP = {
    SourceType.FILE: "migrationgraph.io.file_loader",
    SourceType.CACHE: "migrationgraph.io.cache_loader",
}


def register_loader(source_type: SourceType, loader_class: type) -> None:
    """
    Register a loader in the factory

    Args:
        source_type: Source type
        loader_class: Loader class (must inherit from ComponentLoaderBase)
    """
    if not issubclass(loader_class, ComponentLoaderBase):
        raise ValueError(f"Loader must inherit from ComponentLoaderBase: {loader_class}")

    _LOADER_REGISTRY[source_type] = loader_class
    logger.debug(f"Loader registered: {source_type} -> {loader_class.__name__}")


def create_loader(source_type: SourceType, **kwargs: Any) -> ComponentLoaderBase:
    """
    Create a loader for a source type

    Args:
        source_type: Source type
        **kwargs: Passed to the loader constructor

    Returns:
        Loader instance

    Raises:
        ValidationError: If the source type is not supported or the
            loader cannot be built with the given arguments
    """
    if source_type not in _LOADER_REGISTRY:
        _try_import_loader(source_type)

    if source_type not in _LOADER_REGISTRY:
        available = ", ".join([str(st.value) for st in _LOADER_REGISTRY.keys()])
        raise ValidationError(
            f"Source type '{source_type.value}' is not supported. "
            f"Available types: {available}"
        )

    loader_class = _LOADER_REGISTRY[source_type]

    try:
        return loader_class(**kwargs)
    except TypeError as e:
        logger.error(f"Error creating loader for {source_type}: {e}")
        raise ValidationError(f"Invalid arguments for {source_type.value} loader: {e}")


def get_available_loaders() -> List[SourceType]:
    """
    Return the source types with an available loader

    Returns:
        List of SourceType
    """
    for source_type in _MODULE_MAP:
        if source_type not in _LOADER_REGISTRY:
            _try_import_loader(source_type)

    return list(_LOADER_REGISTRY.keys())


def _try_import_loader(source_type: SourceType) -> None:
    """
    Import the module of a loader so it registers itself

    Args:
        source_type: Source type
    """
    module_name = _MODULE_MAP.get(source_type)
    if module_name is None:
        return

    __import__(module_name, fromlist=[''])
    logger.debug(f"Module {module_name} imported")
