"""Browsable remote URLs for project directories.

Reads the project's ``origin`` remote with git and turns SSH-style remotes
into HTTPS URLs that can be opened in a browser. Every failure is silent:
the session simply has no remote URL.
"""

import logging
import re
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# git@github.com:owner/repo.git
_SCP_LIKE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>[^/].*)$")
# ssh://git@github.com:22/owner/repo.git, git://host/owner/repo
_SSH_URL = re.compile(r"^(?:ssh|git|git\+ssh)://(?:[^@/]+@)?(?P<host>[^/:]+)(?::\d+)?/(?P<path>.+)$")


def normalize_remote_url(remote: str) -> str | None:
    """Convert a git remote to an HTTPS URL.

    Args:
        remote: Remote as configured (e.g., "git@github.com:owner/repo.git").

    Returns:
        HTTPS URL (e.g., "https://github.com/owner/repo"), or None for remotes
        that aren't hosted (local paths, file:// URLs).
    """
    remote = remote.strip()
    if not remote:
        return None

    if remote.startswith(("https://", "http://")):
        url = remote
    else:
        match = _SSH_URL.match(remote)
        if match is None and "://" not in remote:
            match = _SCP_LIKE.match(remote)
        if match is None:
            return None
        url = f"https://{match['host']}/{match['path']}"

    url = url.rstrip("/")
    if url.endswith(".git"):
        url = url[: -len(".git")]
    # Drop credentials embedded in HTTPS remotes
    return re.sub(r"^(https?://)[^@/]+@", r"\1", url)


def _run_git(repo_path: str, args: list[str], timeout: int = 5) -> str | None:
    """Run a git command in the specified directory.

    Args:
        repo_path: Path to run git in.
        args: Git command arguments.
        timeout: Command timeout in seconds.

    Returns:
        Command output, or None on error.
    """
    path = Path(repo_path)
    if not path.is_dir():
        return None

    try:
        result = subprocess.run(
            ["git", "-C", str(path), *args],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        if result.returncode != 0:
            return None
        return result.stdout
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        logger.debug(f"Git command failed: {e}")
        return None


def get_remote_url(project_path: str, timeout: int = 5) -> str | None:
    """Get the browsable URL of a project's origin remote."""
    output = _run_git(project_path, ["config", "--get", "remote.origin.url"], timeout=timeout)
    if not output:
        return None
    return normalize_remote_url(output)


@dataclass
class _CacheEntry:
    """A resolved remote URL (None when the project has none)."""

    url: str | None
    expires_at: float


class RemoteUrlLookup:
    """Remote URL lookup with a short per-project cache.

    The aggregator asks for every session on every scan; caching keeps that
    from spawning a git process per session per poll.
    """

    def __init__(self, cache_seconds: int = 60, timeout: int = 5):
        """Initialize the lookup.

        Args:
            cache_seconds: How long a result is reused. 0 disables caching.
            timeout: Timeout in seconds for the git call.
        """
        self.cache_seconds = cache_seconds
        self.timeout = timeout
        self._cache: dict[str, _CacheEntry] = {}
        self._lock = threading.Lock()

    def lookup(self, project_path: str) -> str | None:
        """Get the remote URL for a project, using the cache when valid."""
        now = time.monotonic()
        with self._lock:
            entry = self._cache.get(project_path)
            if entry is not None and entry.expires_at > now:
                return entry.url

        url = get_remote_url(project_path, timeout=self.timeout)

        if self.cache_seconds > 0:
            with self._lock:
                self._cache[project_path] = _CacheEntry(url=url, expires_at=now + self.cache_seconds)
        return url

    def clear(self) -> None:
        """Drop all cached results."""
        with self._lock:
            self._cache.clear()
