from .context import (
    GitHubContext,
    GitLabContext,
    LocalContext,
    MarketplaceContext,
    URLContext,
)
from .definitions import AgentDefinition, CommandDefinition
from .discovery import (
    RESOURCE_KINDS,
    SKILL_MARKER,
    DiscoveredPlugin,
    ResourceKind,
    ScanResult,
)
from .plan import (
    InstallPlanItem,
    MarketplacePlan,
    PlanConflict,
    TemplatePlan,
    TemplatePlanItem,
    UnresolvedPlugin,
)
from .plugin import (
    ComponentOverride,
    DirectoryOverride,
    FileListOverride,
    GitHubRepoSource,
    GitURLSource,
    PluginOverrides,
    PluginRecord,
    PluginSource,
    RelativePathSource,
    UnknownSource,
)
from .resolved import (
    GitHubLocation,
    GitHubResolved,
    GitLabLocation,
    GitLabResolved,
    LocalResolved,
    ResolvedSource,
    UnsupportedResolved,
)

__all__ = [
    "RESOURCE_KINDS",
    "SKILL_MARKER",
    "AgentDefinition",
    "CommandDefinition",
    "ComponentOverride",
    "DirectoryOverride",
    "DiscoveredPlugin",
    "FileListOverride",
    "GitHubContext",
    "GitHubLocation",
    "GitHubRepoSource",
    "GitHubResolved",
    "GitLabContext",
    "GitLabLocation",
    "GitLabResolved",
    "GitURLSource",
    "InstallPlanItem",
    "LocalContext",
    "LocalResolved",
    "MarketplaceContext",
    "MarketplacePlan",
    "PlanConflict",
    "PluginOverrides",
    "PluginRecord",
    "PluginSource",
    "RelativePathSource",
    "ResolvedSource",
    "ResourceKind",
    "ScanResult",
    "TemplatePlan",
    "TemplatePlanItem",
    "URLContext",
    "UnknownSource",
    "UnresolvedPlugin",
]
