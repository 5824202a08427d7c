"""Global constants for stackctl"""

from enum import Enum
import re

APP_NAME = "stackctl"
LOG_FORMAT = "%(message)s"

# Version related
CONFIG_VERSION = "1.0"

# Project identification
PROJECT_CONFIG_FILE = ".stackctl.yaml"
GITMODULES_FILE = ".gitmodules"

# Deployment files
DEFAULT_COMPOSE_FILE = "docker-compose.yml"
DEFAULT_ENV_FILE = ".env"
DEFAULT_ENV_TEMPLATE = ".env.example"
DEFAULT_NETWORK_FILTER = "librechat"

# Orchestration tooling
COMPOSE_COMMAND_AUTO = "auto"
COMPOSE_V1_COMMAND = ("docker-compose",)
COMPOSE_V2_COMMAND = ("docker", "compose")
DOCKER_BINARY = "docker"
MIN_COMPOSE_VERSION = "1.25.0"  # first release with --env-file
DEFAULT_LOG_TAIL = 100

# Tracked components
DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "main"
DEFAULT_PREVIEW_LIMIT = 10
DEFAULT_SMOKE_TEST_DELAY = 30  # seconds
DEFAULT_BACKUP_BRANCH_PREFIX = "backup"

# Backups
DEFAULT_BACKUP_DIR = "backups"
BACKUP_NAME_PATTERN = "backup-{timestamp}"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
REVISIONS_MANIFEST_FILE = "submodule-info.txt"
ARCHIVE_NAME_PATTERN = "{volume}-data.tar.gz"
DEFAULT_HELPER_IMAGE = "alpine"
DEFAULT_VOLUMES = [
    {"name": "mongodb", "path": "data-node"},
]

# Health checks
DEFAULT_HEALTH_TIMEOUT = 5  # seconds
DEFAULT_PORT = "3080"
DEFAULT_HEALTH_TARGETS = [
    {
        "name": "LibreChat API",
        "type": "http",
        "url": "http://localhost:${PORT}/health",
        "required": True,
    },
    {
        "name": "PKM Service",
        "type": "http",
        "url": "http://localhost:3001/health",
        "required": False,
    },
    {
        "name": "MongoDB",
        "type": "exec",
        "service": "mongodb",
        "command": ["mongosh", "--eval", "db.runCommand('ping')"],
        "required": True,
    },
]


class Command(Enum):
    """Commands understood by the dispatcher"""
    START = "start"
    STOP = "stop"
    RESTART = "restart"
    BUILD = "build"
    LOGS = "logs"
    STATUS = "status"
    UPDATE = "update"
    BACKUP = "backup"
    RESTORE = "restore"
    HEALTH = "health"
    CLEAN = "clean"


# Commands that accept --service
SERVICE_SCOPED_COMMANDS = frozenset({
    Command.START,
    Command.STOP,
    Command.RESTART,
    Command.BUILD,
    Command.LOGS,
})


class TargetKind(Enum):
    HTTP = "http"
    EXEC = "exec"


class PruneKind(Enum):
    CONTAINER = "container"
    IMAGE = "image"
    NETWORK = "network"
    VOLUME = "volume"


# Error codes
class ErrorCode:
    USAGE = "ST001"
    CONFIG_MISSING = "ST002"
    CONFIG_FORMAT_ERROR = "ST003"
    ENVIRONMENT = "ST004"
    ORCHESTRATION_FAILED = "ST005"
    FETCH_FAILED = "ST006"
    CHECKOUT_FAILED = "ST007"
    COMMIT_FAILED = "ST008"
    BACKUP_FAILED = "ST009"
    UNHEALTHY = "ST010"
    NOT_IMPLEMENTED = "ST011"
    BACKUP_REF_FAILED = "ST012"


# Environment variables
ENV_PROJECT_ROOT = "STACKCTL_ROOT"
ENV_CONFIG_PATH = "STACKCTL_CONFIG"
ENV_LOG_LEVEL = "STACKCTL_LOG_LEVEL"
ENV_PORT = "PORT"

# Validation patterns
SERVICE_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_.-]*$")

# Display constants
EMOJI_SUCCESS = "✅"
EMOJI_ERROR = "❌"
EMOJI_WARNING = "⚠️"
EMOJI_START = "🚀"
EMOJI_STOP = "🛑"
EMOJI_RESTART = "🔄"
EMOJI_BUILD = "🔨"
EMOJI_LOGS = "📋"
EMOJI_STATUS = "📊"
EMOJI_DISK = "💾"
EMOJI_NETWORK = "🔗"
EMOJI_UPDATE = "⬆️"
EMOJI_FETCH = "📥"
EMOJI_HEALTH = "🏥"
EMOJI_CLEAN = "🧹"
EMOJI_TEST = "🧪"

# Messages templates
MSG_UP_TO_DATE = f"{EMOJI_SUCCESS} {{component}} is already up to date!"
MSG_UPDATED = f"{EMOJI_SUCCESS} {{component}} updated to {{revision}}"
MSG_BACKUP_CREATED = f"{EMOJI_SUCCESS} Backup created in {{path}}"
MSG_RESTORE_MISSING = "Restore functionality not implemented yet"

# Interactive prompts
PROMPT_CONFIRM_UPDATE = "Update {component} to the latest version?"
PROMPT_CONFIRM_SMOKE_TEST = "Run quick deployment test?"
PROMPT_CONFIRM_VOLUME_PRUNE = "Remove unused volumes? This may delete data!"
