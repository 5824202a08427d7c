"""Path resolution module for stackctl"""

import os
from pathlib import Path
from typing import Optional, Union

from ..constants import (
    ENV_CONFIG_PATH,
    ENV_PROJECT_ROOT,
    GITMODULES_FILE,
    PROJECT_CONFIG_FILE,
)


class PathResolver:
    """Resolves paths within a deployment root

    The deployment root is fixed at construction time; relative paths are
    always interpreted against it, never against the process working
    directory.
    """

    def __init__(self, project_root: Optional[Union[str, Path]] = None):
        """Initialize path resolver

        Args:
            project_root: Deployment root. Defaults to $STACKCTL_ROOT, then
                the current directory.
        """
        if project_root is None:
            project_root = os.environ.get(ENV_PROJECT_ROOT) or Path.cwd()
        self.project_root = Path(project_root).expanduser().resolve()

    def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve a path relative to the deployment root

        Args:
            path: Path to resolve (can be relative or absolute)

        Returns:
            Resolved absolute path
        """
        path = Path(os.path.expanduser(str(path)))

        if path.is_absolute():
            return path

        return (self.project_root / path).resolve()

    def get_config_path(self) -> Path:
        """Get project configuration file path

        Returns:
            $STACKCTL_CONFIG if set, otherwise .stackctl.yaml in the root
        """
        override = os.environ.get(ENV_CONFIG_PATH)
        if override:
            return self.resolve(override)
        return self.project_root / PROJECT_CONFIG_FILE

    def get_gitmodules_path(self) -> Path:
        return self.project_root / GITMODULES_FILE

