"""Git operation utilities"""

import configparser
import logging
import re
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..models.result import CommitInfo

logger = logging.getLogger(__name__)

_SUBMODULE_SECTION = re.compile(r'^submodule\s+"(?P<name>.+)"$')
_FIELD_SEP = "\x00"
# git expands %x00 to NUL in its output; argv itself must not carry one
_LOG_FORMAT = "--format=%H%x00%s"


class GitCommandError(RuntimeError):
    """A git invocation returned a nonzero status"""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        detail = self.stderr or f"exit status {returncode}"
        super().__init__(f"git {' '.join(self.args_list)}: {detail}")


class GitRepository:
    """Thin wrapper around the git CLI bound to one working directory

    Every command runs with an explicit ``-C <path>`` so that no operation
    depends on the process working directory.
    """

    def __init__(self, path: Path, binary: str = "git"):
        self.path = Path(path)
        self.binary = binary

    def _git(self, *args: str) -> str:
        cmd = [self.binary, "-C", str(self.path), *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True
            )
        except FileNotFoundError as e:
            raise GitCommandError(args, 127, str(e)) from e

        if result.returncode != 0:
            raise GitCommandError(args, result.returncode, result.stderr)
        return result.stdout

    def exists(self) -> bool:
        """Check if the path is the top of its own git work tree

        An uninitialized submodule is an empty directory inside the parent
        work tree; git would answer for the parent, so the top level must
        be the path itself.
        """
        if not self.path.is_dir():
            return False
        try:
            toplevel = self._git("rev-parse", "--show-toplevel").strip()
        except GitCommandError:
            return False
        return bool(toplevel) and Path(toplevel).resolve() == self.path.resolve()

    def rev_parse(self, ref: str = "HEAD") -> str:
        """Resolve a reference to a full revision"""
        return self._git("rev-parse", "--verify", f"{ref}^{{commit}}").strip()

    def describe(self, ref: str = "HEAD") -> CommitInfo:
        """Revision and subject line of a commit"""
        output = self._git("log", "-1", _LOG_FORMAT, ref).strip()
        revision, _, summary = output.partition(_FIELD_SEP)
        return CommitInfo(revision=revision, summary=summary)

    def fetch(self, remote: str) -> None:
        """Fetch references from a remote without touching the work tree"""
        self._git("fetch", "--quiet", remote)

    def log_range(self, base: str, tip: str, limit: int) -> List[CommitInfo]:
        """Most recent commits reachable from tip but not from base"""
        output = self._git(
            "log", f"--max-count={limit}", _LOG_FORMAT, f"{base}..{tip}"
        )
        commits = []
        for line in output.splitlines():
            if line:
                revision, _, summary = line.partition(_FIELD_SEP)
                commits.append(CommitInfo(revision=revision, summary=summary))
        return commits

    def count_range(self, base: str, tip: str) -> int:
        """Number of commits reachable from tip but not from base"""
        return int(self._git("rev-list", "--count", f"{base}..{tip}").strip() or 0)

    def create_branch(self, name: str, start: str = "HEAD") -> None:
        """Create a branch without switching to it"""
        self._git("branch", name, start)

    def checkout(self, revision: str) -> None:
        """Check out a revision (detached)"""
        self._git("checkout", "--quiet", revision)

    def add(self, path: str) -> None:
        self._git("add", "--", path)

    def staged_revision(self, path: str) -> Optional[str]:
        """Revision recorded in the index for a submodule path"""
        output = self._git("ls-files", "--stage", "--", path).strip()
        if not output:
            return None
        # <mode> <object> <stage>\t<path>
        fields = output.splitlines()[0].split()
        return fields[1] if len(fields) >= 2 else None

    def commit(self, message: str, paths: Sequence[str]) -> str:
        """Commit only the given paths and return the new revision"""
        self._git("commit", "--quiet", "-m", message, "--", *paths)
        return self.rev_parse("HEAD")


def read_submodules(root: Path) -> List[Dict[str, str]]:
    """
    Read submodule entries from a ``.gitmodules`` file

    Args:
        root: Versioning root containing .gitmodules

    Returns:
        List of dictionaries with ``name``, ``path`` and optional ``branch``,
        in file order. Empty if the file does not exist.
    """
    gitmodules = Path(root) / ".gitmodules"
    if not gitmodules.is_file():
        return []

    # .gitmodules indents keys with tabs, which configparser would read
    # as continuation lines
    text = "\n".join(line.strip() for line in gitmodules.read_text(encoding="utf-8").splitlines())

    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.read_string(text, source=str(gitmodules))

    entries = []
    for section in parser.sections():
        match = _SUBMODULE_SECTION.match(section)
        if not match or not parser.has_option(section, "path"):
            continue
        entry = {
            "name": match.group("name"),
            "path": parser.get(section, "path"),
        }
        if parser.has_option(section, "branch"):
            entry["branch"] = parser.get(section, "branch")
        entries.append(entry)

    return entries
