# src/repodigest/core/ignore.py
import logging
from pathlib import Path, PurePath
from typing import List, Optional, Union

import pathspec

from repodigest.errors import ConfigurationError

logger = logging.getLogger(__name__)


def load_ignore_spec(
    ignore_file: Optional[Path],
    extra_patterns: Optional[List[str]] = None,
    required: bool = False,
) -> Optional[pathspec.PathSpec]:
    """
    Loads gitignore-style rules from an ignore file plus any extra patterns.
    A missing file is only an error when `required` (the user named it).
    Returns None when there is nothing to match against.
    """
    lines: List[str] = []

    if ignore_file is not None:
        if ignore_file.is_file():
            try:
                with open(ignore_file, "r", encoding="utf-8") as f:
                    lines = f.read().splitlines()
            except (OSError, UnicodeDecodeError) as e:
                raise ConfigurationError(f"Could not read ignore file {ignore_file}: {e}") from e
            logger.debug("Loaded %d ignore rules from %s", len(lines), ignore_file)
        elif required:
            raise ConfigurationError(f"Ignore file not found: {ignore_file}")

    if extra_patterns:
        lines.extend(extra_patterns)

    if not any(line.strip() and not line.lstrip().startswith("#") for line in lines):
        return None

    try:
        return pathspec.GitIgnoreSpec.from_lines(lines)
    except Exception as e:
        raise ConfigurationError(f"Error parsing ignore rules: {e}") from e


def is_path_ignored(spec: Optional[pathspec.PathSpec], rel_path: Union[str, PurePath], is_directory: bool = False) -> bool:
    """Directories are matched with a trailing slash so 'venv/' rules apply."""
    if spec is None:
        return False
    path_str = PurePath(rel_path).as_posix()
    if is_directory and not path_str.endswith("/"):
        path_str += "/"
    return spec.match_file(path_str)
