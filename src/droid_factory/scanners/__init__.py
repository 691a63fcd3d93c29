from ._github import GitHubScanner, scan_plugin_github
from ._gitlab import GitLabScanner, scan_plugin_gitlab
from ._local import is_skill_dir, scan_plugin_local
from ._remote import RemoteEntry, RemoteScanner

__all__ = [
    "GitHubScanner",
    "GitLabScanner",
    "RemoteEntry",
    "RemoteScanner",
    "is_skill_dir",
    "scan_plugin_github",
    "scan_plugin_gitlab",
    "scan_plugin_local",
]
