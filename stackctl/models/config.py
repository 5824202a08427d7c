"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..constants import (
    ARCHIVE_NAME_PATTERN,
    CONFIG_VERSION,
    COMPOSE_COMMAND_AUTO,
    DEFAULT_BACKUP_BRANCH_PREFIX,
    DEFAULT_BACKUP_DIR,
    DEFAULT_COMPOSE_FILE,
    DEFAULT_ENV_FILE,
    DEFAULT_ENV_TEMPLATE,
    DEFAULT_HEALTH_TARGETS,
    DEFAULT_HEALTH_TIMEOUT,
    DEFAULT_HELPER_IMAGE,
    DEFAULT_NETWORK_FILTER,
    DEFAULT_PORT,
    DEFAULT_PREVIEW_LIMIT,
    DEFAULT_SMOKE_TEST_DELAY,
    DEFAULT_VOLUMES,
    ENV_PORT,
    TargetKind,
)


@dataclass
class HealthTarget:
    """A single liveness probe target"""

    name: str
    type: str = TargetKind.HTTP.value
    required: bool = True
    timeout: float = DEFAULT_HEALTH_TIMEOUT

    # HTTP specific
    url: Optional[str] = None
    defaults: Dict[str, str] = field(default_factory=dict)

    # Exec specific
    service: Optional[str] = None
    command: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate target configuration"""
        kind = TargetKind(self.type)

        if kind == TargetKind.HTTP:
            if not self.url:
                raise ValueError(f"HTTP health target '{self.name}' requires 'url'")
        elif kind == TargetKind.EXEC:
            if not self.service or not self.command:
                raise ValueError(f"Exec health target '{self.name}' requires 'service' and 'command'")

    @property
    def kind(self) -> TargetKind:
        return TargetKind(self.type)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "timeout": self.timeout,
        }
        if self.url:
            data["url"] = self.url
        if self.defaults:
            data["defaults"] = self.defaults
        if self.service:
            data["service"] = self.service
        if self.command:
            data["command"] = list(self.command)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HealthTarget':
        defaults = dict(data.get("defaults", {}))
        url = data.get("url")
        # The primary endpoint follows the stack's PORT setting
        if url and f"${{{ENV_PORT}}}" in url:
            defaults.setdefault(ENV_PORT, DEFAULT_PORT)

        command = data.get("command", [])
        if isinstance(command, str):
            command = command.split()

        return cls(
            name=data["name"],
            type=data.get("type", TargetKind.HTTP.value),
            required=data.get("required", True),
            timeout=data.get("timeout", DEFAULT_HEALTH_TIMEOUT),
            url=url,
            defaults=defaults,
            service=data.get("service"),
            command=list(command),
        )


@dataclass
class VolumeConfig:
    """Data directory archived into every snapshot"""

    name: str
    path: str

    @property
    def archive_name(self) -> str:
        return ARCHIVE_NAME_PATTERN.format(volume=self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "path": self.path}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'VolumeConfig':
        return cls(name=data["name"], path=data["path"])


@dataclass
class ComposeSettings:
    """Orchestration file settings"""

    file: str = DEFAULT_COMPOSE_FILE
    env_file: str = DEFAULT_ENV_FILE
    env_template: str = DEFAULT_ENV_TEMPLATE
    command: str = COMPOSE_COMMAND_AUTO
    network_filter: str = DEFAULT_NETWORK_FILTER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "env_file": self.env_file,
            "env_template": self.env_template,
            "command": self.command,
            "network_filter": self.network_filter,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ComposeSettings':
        return cls(**data)


@dataclass
class BackupSettings:
    """Snapshot settings"""

    directory: str = DEFAULT_BACKUP_DIR
    helper_image: str = DEFAULT_HELPER_IMAGE
    volumes: List[VolumeConfig] = field(
        default_factory=lambda: [VolumeConfig.from_dict(v) for v in DEFAULT_VOLUMES]
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "directory": self.directory,
            "helper_image": self.helper_image,
            "volumes": [v.to_dict() for v in self.volumes],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BackupSettings':
        settings = cls(
            directory=data.get("directory", DEFAULT_BACKUP_DIR),
            helper_image=data.get("helper_image", DEFAULT_HELPER_IMAGE),
        )
        if "volumes" in data:
            volumes = data["volumes"] or []
            if not isinstance(volumes, list) or not all(isinstance(v, dict) for v in volumes):
                raise TypeError("backup.volumes must be a list of mappings")
            settings.volumes = [VolumeConfig.from_dict(v) for v in volumes]
        return settings


@dataclass
class UpdateSettings:
    """Tracked component update settings"""

    preview_limit: int = DEFAULT_PREVIEW_LIMIT
    smoke_test_delay: int = DEFAULT_SMOKE_TEST_DELAY
    backup_prefix: str = DEFAULT_BACKUP_BRANCH_PREFIX

    def to_dict(self) -> Dict[str, Any]:
        return {
            "preview_limit": self.preview_limit,
            "smoke_test_delay": self.smoke_test_delay,
            "backup_prefix": self.backup_prefix,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UpdateSettings':
        return cls(**data)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    """Return an optional mapping section, rejecting any other shape"""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


@dataclass
class StackConfig:
    """Complete project configuration

    This represents the configuration stored in .stackctl.yaml. Every
    section is optional; an absent file yields the defaults.
    """

    version: str = CONFIG_VERSION
    project_name: str = ""
    compose: ComposeSettings = field(default_factory=ComposeSettings)

    # Per-submodule overrides keyed by submodule path
    components: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    health_targets: List[HealthTarget] = field(
        default_factory=lambda: [HealthTarget.from_dict(t) for t in DEFAULT_HEALTH_TARGETS]
    )
    backup: BackupSettings = field(default_factory=BackupSettings)
    update: UpdateSettings = field(default_factory=UpdateSettings)

    @property
    def primary_health_target(self) -> Optional[HealthTarget]:
        """First HTTP target; used for the post-update smoke test"""
        for target in self.health_targets:
            if target.kind == TargetKind.HTTP:
                return target
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StackConfig':
        """Create from dictionary"""
        config = cls(version=str(data.get("version", CONFIG_VERSION)))

        config.project_name = _section(data, "project").get("name", "")
        config.compose = ComposeSettings.from_dict(_section(data, "compose"))

        components = _section(data, "components")
        for path, overrides in components.items():
            if overrides is not None and not isinstance(overrides, dict):
                raise TypeError(f"components.{path} must be a mapping")
        config.components = components

        health = _section(data, "health")
        if "targets" in health:
            targets = health["targets"] or []
            if not isinstance(targets, list) or not all(isinstance(t, dict) for t in targets):
                raise TypeError("health.targets must be a list of mappings")
            config.health_targets = [HealthTarget.from_dict(t) for t in targets]

        config.backup = BackupSettings.from_dict(_section(data, "backup"))
        config.update = UpdateSettings.from_dict(_section(data, "update"))

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version": self.version,
            "project": {"name": self.project_name},
            "compose": self.compose.to_dict(),
            "components": self.components,
            "health": {"targets": [t.to_dict() for t in self.health_targets]},
            "backup": self.backup.to_dict(),
            "update": self.update.to_dict(),
        }


@dataclass
class DeploymentConfig:
    """Resolved deployment files for one invocation

    All paths are absolute; nothing in stackctl depends on the process
    working directory.
    """

    root: Path
    compose_file: Path
    env_file: Path
    env_template: Path
    settings: StackConfig = field(default_factory=StackConfig)

    @property
    def backups_dir(self) -> Path:
        return self.root / self.settings.backup.directory
