# src/repodigest/acquire.py
import logging
import re
import subprocess
import time
from pathlib import Path

from repodigest.errors import CloneError, ConfigurationError

logger = logging.getLogger(__name__)

_GITHUB_URL_RE = re.compile(r"^https://github\.com/[\w.-]+/[\w.-]+(\.git)?$", re.IGNORECASE)


def is_valid_github_url(url: str) -> bool:
    return bool(url) and _GITHUB_URL_RE.match(url) is not None


def repo_name_from_url(url: str) -> str:
    raw_name = url.rstrip("/").split("/")[-1] or "repo"
    return re.sub(r"\.git$", "", raw_name) or "repo"


def clone_repository(url: str, dest_parent: Path) -> Path:
    """
    Shallow-clones a GitHub repository into a fresh directory under
    dest_parent and returns its path.
    """
    if not is_valid_github_url(url):
        raise ConfigurationError(f"Invalid GitHub repository URL: {url!r}")

    target = Path(dest_parent) / f"{repo_name_from_url(url)}-{int(time.time() * 1000)}"
    target.mkdir(parents=True, exist_ok=True)

    logger.info("Cloning %s into %s", url, target)
    try:
        subprocess.run(
            ["git", "clone", "--depth", "1", url, str(target)],
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise CloneError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        logger.error("Error cloning repo: %s", (e.stderr or "").strip())
        raise CloneError(f"Failed to clone repository {url}") from e
    return target
