# stackctl/core/project_manager.py
"""Deployment configuration loading and tracked component discovery"""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from .path_resolver import PathResolver
from ..api.exceptions import ConfigError, ConfigMissingError, UsageError
from ..models.component import TrackedComponent
from ..models.config import DeploymentConfig, StackConfig
from ..utils.git_utils import read_submodules

logger = logging.getLogger(__name__)


class ProjectManager:
    """Loads the deployment configuration for one deployment root

    Settings come from three layers, later ones winning: built-in
    defaults, the optional .stackctl.yaml file, command line overrides.
    """

    def __init__(self, path_resolver: Optional[PathResolver] = None):
        """Initialize project manager

        Args:
            path_resolver: PathResolver bound to the deployment root
        """
        self.path_resolver = path_resolver or PathResolver()
        self._config: Optional[StackConfig] = None

    @property
    def root(self) -> Path:
        return self.path_resolver.project_root

    def load_config(self) -> StackConfig:
        """Load project configuration

        Returns:
            StackConfig object (defaults when no file exists)

        Raises:
            ConfigError: If the configuration file is invalid
        """
        if self._config is not None:
            return self._config

        config_file = self.path_resolver.get_config_path()

        if not config_file.exists():
            logger.debug("No %s found, using defaults", config_file.name)
            self._config = StackConfig()
            return self._config

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load project configuration {config_file}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Project configuration {config_file} must be a mapping")

        try:
            self._config = StackConfig.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid project configuration {config_file}: {e}")

        logger.info("Loaded project configuration from %s", config_file)
        return self._config

    def build_deployment(self,
                         compose_file: Optional[str] = None,
                         env_file: Optional[str] = None) -> DeploymentConfig:
        """Resolve the deployment files for this invocation

        Args:
            compose_file: Orchestration file override (-f/--file)
            env_file: Environment file override (-e/--env)

        Returns:
            DeploymentConfig with absolute paths
        """
        config = self.load_config()
        resolve = self.path_resolver.resolve

        return DeploymentConfig(
            root=self.root,
            compose_file=resolve(compose_file or config.compose.file),
            env_file=resolve(env_file or config.compose.env_file),
            env_template=resolve(config.compose.env_template),
            settings=config,
        )

    def tracked_components(self, require: bool = False) -> List[TrackedComponent]:
        """Discover tracked components from the submodule registry

        Args:
            require: Raise if the versioning root has no .gitmodules

        Returns:
            Components in .gitmodules order, with configured overrides

        Raises:
            ConfigMissingError: If require is set and .gitmodules is absent
        """
        gitmodules = self.path_resolver.get_gitmodules_path()
        if require and not gitmodules.is_file():
            raise ConfigMissingError(
                f"{gitmodules} not found; '{self.root}' is not a deployment root with submodules",
                hint="Run stackctl from the deployment repository root or pass --root",
            )

        overrides = self.load_config().components
        components = []
        for entry in read_submodules(self.root):
            settings = dict(overrides.get(entry["path"]) or {})
            settings.setdefault("name", entry["name"])
            if "branch" in entry:
                settings.setdefault("branch", entry["branch"])
            components.append(TrackedComponent.from_dict(entry["path"], settings))

        return components

    def select_components(self, selectors: Sequence[str]) -> List[TrackedComponent]:
        """Pick tracked components by name or path

        Args:
            selectors: Component names or paths (empty means all)

        Returns:
            Selected components in registry order

        Raises:
            UsageError: If a selector matches no component
        """
        components = self.tracked_components(require=True)
        if not selectors:
            return components

        unknown = [s for s in selectors if not any(c.matches(s) for c in components)]
        if unknown:
            known = ", ".join(c.name for c in components) or "none"
            raise UsageError(
                f"Unknown component(s): {', '.join(unknown)}",
                hint=f"Tracked components: {known}",
            )

        return [c for c in components if any(c.matches(s) for s in selectors)]
