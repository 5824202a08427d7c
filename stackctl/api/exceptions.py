"""Exception definitions for stackctl"""

from typing import List, Optional, Sequence

from ..constants import ErrorCode


class StackToolError(Exception):
    """Base exception for stackctl"""

    def __init__(self, message: str, error_code: str = None, hint: str = None):
        super().__init__(message)
        self.error_code = error_code
        self.hint = hint


class UsageError(StackToolError):
    """Invalid command line invocation"""

    def __init__(self, message: str, hint: str = None):
        super().__init__(message, ErrorCode.USAGE, hint or "Run 'stackctl --help' for usage")


class ConfigMissingError(StackToolError):
    """A required file is absent and cannot be created from a template"""

    def __init__(self, message: str, hint: str = None):
        super().__init__(message, ErrorCode.CONFIG_MISSING, hint)


class ConfigError(StackToolError):
    """Project configuration file is malformed"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class EnvironmentError(StackToolError):
    """Container runtime or orchestration tool is unavailable"""

    def __init__(self, message: str, hint: str = None):
        super().__init__(message, ErrorCode.ENVIRONMENT, hint)


class OrchestrationError(StackToolError):
    """External orchestration command returned a failure"""

    def __init__(self, command: Sequence[str], returncode: int, output: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.output = (output or "").strip()

        message = f"'{' '.join(self.command)}' exited with status {returncode}"
        if self.output:
            message = f"{message}\n{self.output}"
        super().__init__(message, ErrorCode.ORCHESTRATION_FAILED)


class UpdateError(StackToolError):
    """Tracked component update error"""

    def __init__(self, component: str, message: str, error_code: str = None, hint: str = None):
        super().__init__(f"{component}: {message}", error_code, hint)
        self.component = component


class FetchError(UpdateError):
    """Fetching upstream references failed; nothing was changed"""

    def __init__(self, component: str, detail: str):
        super().__init__(
            component,
            f"fetch failed: {detail}",
            ErrorCode.FETCH_FAILED,
            "Check network access to the component's remote and retry"
        )


class CheckoutError(UpdateError):
    """Checking out the new revision failed; parent repository untouched"""

    def __init__(self, component: str, detail: str, path: str = None):
        hint = None
        if path:
            hint = f"Inspect the working tree with 'git -C {path} status' and resolve local changes"
        super().__init__(component, f"checkout failed: {detail}", ErrorCode.CHECKOUT_FAILED, hint)


class CommitError(UpdateError):
    """Component was checked out but the parent pin could not be committed"""

    def __init__(self, component: str, detail: str, path: str, previous: str, current: str):
        message = (
            f"commit of the new pin failed: {detail}\n"
            f"PARTIAL UPDATE: working tree '{path}' is at {current[:7]} "
            f"but the versioning root still records {previous[:7]}"
        )
        hint = f"Revert with 'git -C {path} checkout {previous}' or commit the pin manually"
        super().__init__(component, message, ErrorCode.COMMIT_FAILED, hint)
        self.previous = previous
        self.current = current


class BackupError(StackToolError):
    """Snapshot creation error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.BACKUP_FAILED)


class UnhealthyStackError(StackToolError):
    """Required health targets are failing"""

    def __init__(self, failing: List[str]):
        message = f"Stack is unhealthy: {', '.join(failing)}"
        super().__init__(message, ErrorCode.UNHEALTHY, "Run 'stackctl health' for details")
        self.failing = failing


class NotImplementedError(StackToolError):
    """Documented gap in the command set"""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ErrorCode.NOT_IMPLEMENTED, hint)

