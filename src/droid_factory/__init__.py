"""Install Factory commands, droids, hooks and skills from templates or plugin marketplaces."""

__version__ = "0.1.0"

from .config import DestDirs, InstallerConfig
from .convert import convert_agent_to_droid, convert_command
from .discovery import discover_plugins, format_discovery_warnings, format_rate_limit_warning
from .errors import FetchError, InstallError, LoadError, RefNotFoundError
from .factory_settings import CustomDroidsSetting, read_custom_droids_setting
from .fetchers import HttpSession, RateLimitInfo
from .installer import InstallReport, ItemResult, execute_plan, install_templates
from .loaders import LoadedMarketplace, load_marketplace, normalize_plugins
from .models import (
    DiscoveredPlugin,
    GitHubContext,
    GitLabContext,
    InstallPlanItem,
    LocalContext,
    MarketplacePlan,
    PluginRecord,
    ResolvedSource,
    TemplatePlan,
    URLContext,
)
from .planner import (
    compute_marketplace_plan,
    compute_template_plan,
    flatten_name,
    list_basenames,
    resolve_selection,
)
from .resolver import resolve_plugin_source
from .scanners import scan_plugin_github, scan_plugin_gitlab, scan_plugin_local

__all__ = [
    "CustomDroidsSetting",
    "DestDirs",
    "DiscoveredPlugin",
    "FetchError",
    "GitHubContext",
    "GitLabContext",
    "HttpSession",
    "InstallError",
    "InstallPlanItem",
    "InstallReport",
    "InstallerConfig",
    "ItemResult",
    "LoadError",
    "LoadedMarketplace",
    "LocalContext",
    "MarketplacePlan",
    "PluginRecord",
    "RateLimitInfo",
    "RefNotFoundError",
    "ResolvedSource",
    "TemplatePlan",
    "URLContext",
    "__version__",
    "compute_marketplace_plan",
    "compute_template_plan",
    "convert_agent_to_droid",
    "convert_command",
    "discover_plugins",
    "execute_plan",
    "flatten_name",
    "format_discovery_warnings",
    "format_rate_limit_warning",
    "install_templates",
    "list_basenames",
    "load_marketplace",
    "normalize_plugins",
    "read_custom_droids_setting",
    "resolve_plugin_source",
    "resolve_selection",
    "scan_plugin_github",
    "scan_plugin_gitlab",
    "scan_plugin_local",
]
