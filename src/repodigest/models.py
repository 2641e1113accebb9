# src/repodigest/models.py
from dataclasses import dataclass, field
from typing import FrozenSet, Iterator, Optional, Tuple

import pathspec

from repodigest import config
from repodigest.core.rules import Rule
from repodigest.errors import ConfigurationError


@dataclass(frozen=True)
class FileRecord:
    """Immutable snapshot of one scanned and scored file."""
    path: str
    content: str
    token_count: int
    score: float
    depth: int = 0
    priority: bool = False


@dataclass(frozen=True)
class Batch:
    """An ordered group of records sent to one summarization call."""
    records: Tuple[FileRecord, ...]

    def __iter__(self) -> Iterator[FileRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(r.path for r in self.records)

    @property
    def token_count(self) -> int:
        return sum(r.token_count for r in self.records)

    def is_oversized(self, max_tokens: int) -> bool:
        return len(self.records) == 1 and self.records[0].token_count > max_tokens


@dataclass(frozen=True)
class ScoringWeights:
    priority_bonus: float = config.PRIORITY_BONUS
    depth_penalty: float = config.DEPTH_PENALTY
    tokens_per_point: float = config.TOKENS_PER_POINT

    def score(self, priority: bool, depth: int, token_count: int) -> float:
        bonus = self.priority_bonus if priority else 0.0
        return bonus - self.depth_penalty * depth + token_count / self.tokens_per_point


@dataclass(frozen=True)
class ScanPolicy:
    """Rules deciding which files are read and scored."""
    allowed_extensions: FrozenSet[str] = config.DEFAULT_ALLOWED_EXTENSIONS
    priority_names: Tuple[Rule, ...] = config.DEFAULT_PRIORITY_NAMES
    skip_names: Tuple[Rule, ...] = config.DEFAULT_SKIP_NAMES
    skip_dirs: Tuple[Rule, ...] = config.DEFAULT_SKIP_DIRS
    max_file_size_bytes: int = config.MAX_FILE_SIZE_BYTES
    max_depth: Optional[int] = None
    ignore_spec: Optional[pathspec.PathSpec] = field(default=None, compare=False)
    weights: ScoringWeights = ScoringWeights()

    @classmethod
    def default(cls) -> "ScanPolicy":
        return cls()

    def validate(self) -> "ScanPolicy":
        if isinstance(self.max_file_size_bytes, bool) or not isinstance(self.max_file_size_bytes, int):
            raise ConfigurationError(f"max_file_size_bytes must be an integer, got {self.max_file_size_bytes!r}")
        if self.max_file_size_bytes < 0:
            raise ConfigurationError(f"max_file_size_bytes must be >= 0, got {self.max_file_size_bytes}")
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigurationError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.weights.tokens_per_point <= 0:
            raise ConfigurationError("tokens_per_point must be positive")
        return self
