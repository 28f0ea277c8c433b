from tablekit.config.settings import (
    TablekitConfig,
    configure,
    get_settings,
    load_config,
    reset_settings,
    resolve_effective_config,
)

__all__ = [
    "TablekitConfig",
    "configure",
    "get_settings",
    "load_config",
    "reset_settings",
    "resolve_effective_config",
]
