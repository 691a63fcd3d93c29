from ._executor import InstallReport, ItemResult, execute_plan, install_templates
from ._files import copy_dir, copy_file, download_skill_dir, download_to_file

__all__ = [
    "InstallReport",
    "ItemResult",
    "copy_dir",
    "copy_file",
    "download_skill_dir",
    "download_to_file",
    "execute_plan",
    "install_templates",
]
