"""Tracked component data models"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import DEFAULT_REMOTE, DEFAULT_BRANCH


@dataclass
class TrackedComponent:
    """An independently-versioned codebase pinned inside the versioning root

    Components are registered by their submodule entry; ``path`` is relative
    to the versioning root.
    """
    name: str
    path: str
    remote: str = DEFAULT_REMOTE
    branch: str = DEFAULT_BRANCH
    revision: Optional[str] = None

    @property
    def upstream_ref(self) -> str:
        """Remote-tracking reference of the designated upstream branch"""
        return f"{self.remote}/{self.branch}"

    @property
    def slug(self) -> str:
        """Name usable in branch and file names"""
        return "".join(c if c.isalnum() or c in "-_." else "-" for c in self.name).strip("-").lower()

    def resolve(self, root: Path) -> Path:
        """Absolute working directory of the component"""
        return (Path(root) / self.path).resolve()

    def matches(self, selector: str) -> bool:
        """Check whether a user-supplied selector names this component"""
        selector = selector.strip().rstrip("/")
        return selector.lower() in (self.name.lower(), self.path.lower(), self.slug)

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_dict(cls, path: str, data: Dict[str, Any]) -> 'TrackedComponent':
        """Create from a ``components`` entry keyed by submodule path"""
        data = data or {}
        return cls(
            name=data.get("name", path),
            path=path,
            remote=data.get("remote", DEFAULT_REMOTE),
            branch=data.get("branch", DEFAULT_BRANCH),
        )
