# src/repodigest/core/packer.py
import logging
from typing import Iterable, List

from repodigest.errors import ConfigurationError
from repodigest.models import Batch, FileRecord

logger = logging.getLogger(__name__)


def check_batch_budget(max_tokens_per_batch: int) -> None:
    if isinstance(max_tokens_per_batch, bool) or not isinstance(max_tokens_per_batch, int):
        raise ConfigurationError(f"max_tokens_per_batch must be an integer, got {max_tokens_per_batch!r}")
    if max_tokens_per_batch <= 0:
        raise ConfigurationError(f"max_tokens_per_batch must be positive, got {max_tokens_per_batch}")


def pack(records: Iterable[FileRecord], max_tokens_per_batch: int) -> List[Batch]:
    """
    Greedily splits records into batches of at most max_tokens_per_batch
    estimated tokens, keeping input order. A record larger than the budget
    gets a batch of its own.
    """
    check_batch_budget(max_tokens_per_batch)

    batches: List[Batch] = []
    current: List[FileRecord] = []
    current_tokens = 0

    for record in records:
        if current and current_tokens + record.token_count > max_tokens_per_batch:
            batches.append(Batch(tuple(current)))
            current = []
            current_tokens = 0

        current.append(record)
        current_tokens += record.token_count

    if current:
        batches.append(Batch(tuple(current)))

    for batch in batches:
        if batch.is_oversized(max_tokens_per_batch):
            logger.debug(
                "Batch holds a single oversized file %s (%d > %d tokens)",
                batch.records[0].path, batch.token_count, max_tokens_per_batch,
            )

    return batches
