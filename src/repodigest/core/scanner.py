# src/repodigest/core/scanner.py
import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from repodigest import config
from repodigest.core.ignore import is_path_ignored
from repodigest.core.rules import matches_any
from repodigest.core.selector import TopKSelector, UnboundedCollector
from repodigest.errors import RepositoryNotFoundError
from repodigest.models import FileRecord, ScanPolicy
from repodigest.utils.tokenizer import estimate_tokens

logger = logging.getLogger(__name__)

Selector = Union[TopKSelector, UnboundedCollector]

# (name, is_dir, is_file)
_DirEntry = Tuple[str, bool, bool]


@dataclass
class ScanStats:
    files_seen: int = 0
    files_read: int = 0
    files_skipped: int = 0
    dirs_pruned: int = 0
    errors: int = 0


class ProjectScanner:
    """
    Walks a repository concurrently, one task per directory, and offers
    every accepted file to a selector as soon as it has been read.
    """

    def __init__(self, root_dir: Path, policy: ScanPolicy, selector: Selector):
        self.root_dir = Path(root_dir)
        self.policy = policy.validate()
        self.selector = selector
        self.stats = ScanStats()

    async def walk(self) -> ScanStats:
        if not self.root_dir.is_dir():
            raise RepositoryNotFoundError(f"Not a directory: {self.root_dir}")
        await self._walk_dir(self.root_dir, "", 0)
        logger.debug(
            "Scan of %s done: %d seen, %d read, %d skipped, %d dirs pruned, %d errors",
            self.root_dir, self.stats.files_seen, self.stats.files_read,
            self.stats.files_skipped, self.stats.dirs_pruned, self.stats.errors,
        )
        return self.stats

    async def _walk_dir(self, abs_dir: Path, rel_dir: str, depth: int) -> None:
        try:
            entries = await asyncio.to_thread(_list_dir, abs_dir)
        except OSError as e:
            self.stats.errors += 1
            logger.warning("Skipping directory %s (%s)", rel_dir or ".", e)
            return

        policy = self.policy
        tasks = []
        for name, is_dir, is_file in entries:
            rel_path = f"{rel_dir}/{name}" if rel_dir else name

            if is_dir:
                if self._should_prune(name, rel_path, depth + 1):
                    self.stats.dirs_pruned += 1
                    logger.debug("Pruning directory %s", rel_path)
                    continue
                tasks.append(self._walk_dir(abs_dir / name, rel_path, depth + 1))
                continue

            if not is_file:
                continue

            self.stats.files_seen += 1
            if matches_any(name, policy.skip_names) or is_path_ignored(policy.ignore_spec, rel_path):
                self.stats.files_skipped += 1
                continue

            priority = matches_any(name, policy.priority_names)
            if not priority and Path(name).suffix not in policy.allowed_extensions:
                self.stats.files_skipped += 1
                continue

            tasks.append(self._process_file(abs_dir / name, rel_path, depth, priority))

        # return_exceptions keeps one failed child from cancelling its siblings
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                self.stats.errors += 1
                logger.warning("Scan task under %s failed: %s", rel_dir or ".", result)

    def _should_prune(self, name: str, rel_path: str, depth: int) -> bool:
        policy = self.policy
        if policy.max_depth is not None and depth > policy.max_depth:
            return True
        if matches_any(name, policy.skip_dirs):
            return True
        return is_path_ignored(policy.ignore_spec, rel_path, is_directory=True)

    async def _process_file(self, abs_path: Path, rel_path: str, depth: int, priority: bool) -> None:
        try:
            content = await asyncio.to_thread(_read_text, abs_path, self.policy.max_file_size_bytes)
        except (OSError, UnicodeDecodeError) as e:
            self.stats.errors += 1
            logger.warning("Skipping %s (read error: %s)", rel_path, e)
            return

        if content is None:
            self.stats.files_skipped += 1
            return

        self.stats.files_read += 1
        tokens = estimate_tokens(content)
        record = FileRecord(
            path=rel_path,
            content=content,
            token_count=tokens,
            score=self.policy.weights.score(priority, depth, tokens),
            depth=depth,
            priority=priority,
        )
        self.selector.offer(record)


def _list_dir(path: Path) -> List[_DirEntry]:
    entries = []
    with os.scandir(path) as it:
        for entry in it:
            try:
                # Directory symlinks are not followed; file symlinks are.
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError:
                is_dir = is_file = False
            entries.append((entry.name, is_dir, is_file))
    entries.sort()
    return entries


def _read_text(path: Path, max_size: int) -> Optional[str]:
    """
    Returns the file's text, or None if it is oversized or looks binary.
    Size is checked before reading so huge files are never loaded.
    """
    if path.stat().st_size > max_size:
        logger.debug("Skipping %s (over %d bytes)", path, max_size)
        return None
    data = path.read_bytes()
    if b"\0" in data[:1024]:
        logger.debug("Skipping %s (binary)", path)
        return None
    return data.decode("utf-8")


def _make_selector(capacity: Optional[int]) -> Selector:
    if capacity is None:
        return UnboundedCollector()
    return TopKSelector(capacity)


async def scan_async(
    root_path: Union[str, Path],
    policy: Optional[ScanPolicy] = None,
    capacity: Optional[int] = config.TOP_FILES_CAPACITY,
) -> List[FileRecord]:
    """
    Scans root_path and returns the best `capacity` files by descending
    score. capacity=None keeps every accepted file.
    """
    policy = (policy or ScanPolicy.default()).validate()
    selector = _make_selector(capacity)
    scanner = ProjectScanner(Path(root_path), policy, selector)
    await scanner.walk()
    return selector.drain()


def scan(
    root_path: Union[str, Path],
    policy: Optional[ScanPolicy] = None,
    capacity: Optional[int] = config.TOP_FILES_CAPACITY,
) -> List[FileRecord]:
    """Blocking wrapper around scan_async."""
    return asyncio.run(scan_async(root_path, policy, capacity))
