"""Dependency loaders — auto-registered on import."""

from licenseplist.engines.loaders import (
    carthage,  # noqa: F401
    cocoapods,  # noqa: F401
    config_entries,  # noqa: F401
    mint,  # noqa: F401
    swift_package,  # noqa: F401
)
from licenseplist.engines.loaders.registry import (
    LOADER_REGISTRY,
    Loader,
    load_all,
    ordered_loaders,
    register_loader,
)

__all__ = ["LOADER_REGISTRY", "Loader", "load_all", "ordered_loaders", "register_loader"]
