from __future__ import annotations

import re
import subprocess
import urllib.parse
from pathlib import Path
from typing import Callable

_SCP_REMOTE_RE = re.compile(r"^(?:[\w.-]+@)?(?P<host>[\w.-]+):(?P<path>(?!//).+)$")
_DEFAULT_BRANCH = "HEAD"

GitRunner = Callable[[list[str], Path], str]


def _run_git(
    args: list[str],
    cwd: Path,
    *,
    check_output_fn: Callable[..., str] = subprocess.check_output,
) -> str:
    return check_output_fn(
        ["git", "-C", str(cwd), *args],
        text=True,
        stderr=subprocess.DEVNULL,
    ).strip()


def normalize_remote_url(url: str) -> str | None:
    """Turn a git remote URL into the https base URL of the repository."""
    url = url.strip()
    if not url:
        return None
    scp = _SCP_REMOTE_RE.match(url)
    if scp is not None and "://" not in url:
        host, path = scp.group("host"), scp.group("path")
    else:
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme not in {"http", "https", "ssh", "git"} or not parsed.hostname:
            return None
        host, path = parsed.hostname, parsed.path
    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    if not path:
        return None
    return f"https://{host}/{path}"


def git_remote(
    path: Path,
    *,
    remote_name: str = "origin",
    run_git_fn: GitRunner = _run_git,
) -> str | None:
    try:
        url = run_git_fn(["config", "--get", f"remote.{remote_name}.url"], path)
    except (subprocess.CalledProcessError, OSError):
        url = ""
    if not url:
        try:
            remotes = run_git_fn(["remote"], path).split()
            if not remotes:
                return None
            url = run_git_fn(["config", "--get", f"remote.{remotes[0]}.url"], path)
        except (subprocess.CalledProcessError, OSError):
            return None
    return normalize_remote_url(url)


def git_branch(
    path: Path,
    branch: str | None = None,
    *,
    run_git_fn: GitRunner = _run_git,
) -> str:
    if branch:
        return branch
    try:
        current = run_git_fn(["rev-parse", "--abbrev-ref", "HEAD"], path)
    except (subprocess.CalledProcessError, OSError):
        return _DEFAULT_BRANCH
    return current or _DEFAULT_BRANCH
