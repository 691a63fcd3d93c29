from .marketplace import (
    FLATTEN_SEP,
    compute_marketplace_plan,
    flatten_name,
    plugin_root_locator,
    source_type,
)
from .templates import (
    TEMPLATES_DIR,
    compute_template_plan,
    list_basenames,
    resolve_selection,
    template_description,
)

__all__ = [
    "FLATTEN_SEP",
    "TEMPLATES_DIR",
    "compute_marketplace_plan",
    "compute_template_plan",
    "flatten_name",
    "list_basenames",
    "plugin_root_locator",
    "resolve_selection",
    "source_type",
    "template_description",
]
