# src/repodigest/pipeline.py
"""
Orchestration: (clone ->) scan -> select -> pack -> summarize, with progress events
and result caching. The summarization function is supplied by the caller;
nothing here talks to a model provider.
"""
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from repodigest import config
from repodigest.acquire import clone_repository, is_valid_github_url
from repodigest.cache import TTLCache
from repodigest.core.packer import check_batch_budget, pack
from repodigest.core.scanner import scan
from repodigest.errors import ConfigurationError
from repodigest.models import Batch, ScanPolicy

logger = logging.getLogger(__name__)

Summarize = Callable[[str], str]
Synthesize = Callable[[Sequence[str]], str]


@dataclass(frozen=True)
class ProgressEvent:
    step: str
    message: str = ""
    progress: Optional[str] = None

    def to_json(self) -> str:
        payload = {"step": self.step}
        if self.message:
            payload["message"] = self.message
        if self.progress is not None:
            payload["progress"] = self.progress
        return json.dumps(payload)


@dataclass(frozen=True)
class DigestResult:
    batch_summaries: List[str]
    architecture: Optional[str]
    batch_paths: List[List[str]]
    from_cache: bool = False


def render_batch(batch: Batch) -> str:
    """The text handed to the summarizer for one batch."""
    return "\n\n".join(f"// {record.path}\n{record.content}" for record in batch)


def digest_repository(
    root: Union[str, Path],
    summarize: Summarize,
    *,
    policy: Optional[ScanPolicy] = None,
    capacity: Optional[int] = config.TOP_FILES_CAPACITY,
    max_tokens: int = config.DEFAULT_MAX_TOKENS_PER_BATCH,
    synthesize: Optional[Synthesize] = None,
    cache: Optional[TTLCache] = None,
    cache_key: Optional[str] = None,
    ttl_seconds: float = config.CACHE_TTL_SECONDS,
    concurrency: int = config.ANALYSIS_CONCURRENCY,
    on_progress: Optional[Callable[[ProgressEvent], None]] = None,
) -> DigestResult:
    check_batch_budget(max_tokens)
    if concurrency < 1:
        raise ConfigurationError(f"concurrency must be >= 1, got {concurrency}")

    def emit(event: ProgressEvent):
        logger.debug("progress %s", event.to_json())
        if on_progress is not None:
            on_progress(event)

    key = cache_key or str(Path(root).resolve())
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            emit(ProgressEvent("cache", "Result served from cache"))
            return replace(cached, from_cache=True)

    try:
        files = scan(root, policy, capacity)
        emit(ProgressEvent("read", f"Files read successfully ({len(files)} selected)"))

        batches = pack(files, max_tokens)
        summaries: List[str] = []
        if batches:
            with ThreadPoolExecutor(max_workers=concurrency) as executor:
                for start in range(0, len(batches), concurrency):
                    window = batches[start:start + concurrency]
                    summaries.extend(executor.map(lambda b: summarize(render_batch(b)), window))
                    done = start + len(window)
                    emit(ProgressEvent("analyze", progress=f"Batch {done}/{len(batches)}"))

        architecture = None
        if synthesize is not None and summaries:
            architecture = synthesize(summaries)
            emit(ProgressEvent("synthesize", "Architecture overview complete"))
    except Exception as e:
        emit(ProgressEvent("error", str(e)))
        raise

    result = DigestResult(
        batch_summaries=summaries,
        architecture=architecture,
        batch_paths=[list(b.paths) for b in batches],
    )
    if cache is not None:
        cache.set_with_ttl(key, result, ttl_seconds)
    emit(ProgressEvent("done", f"{len(batches)} batches summarized"))
    return result


def digest_url(
    url: str,
    summarize: Summarize,
    dest_parent: Union[str, Path],
    *,
    policy: Optional[ScanPolicy] = None,
    capacity: Optional[int] = config.TOP_FILES_CAPACITY,
    max_tokens: int = config.DEFAULT_MAX_TOKENS_PER_BATCH,
    synthesize: Optional[Synthesize] = None,
    cache: Optional[TTLCache] = None,
    ttl_seconds: float = config.CACHE_TTL_SECONDS,
    concurrency: int = config.ANALYSIS_CONCURRENCY,
    on_progress: Optional[Callable[[ProgressEvent], None]] = None,
) -> DigestResult:
    """
    Digests a GitHub repository by URL. Results are cached under the URL,
    so a cache hit skips the clone entirely.
    """
    if not is_valid_github_url(url):
        raise ConfigurationError(f"Invalid GitHub repository URL: {url!r}")
    check_batch_budget(max_tokens)

    def emit(event: ProgressEvent):
        if on_progress is not None:
            on_progress(event)

    if cache is not None:
        cached = cache.get(url)
        if cached is not None:
            emit(ProgressEvent("cache", "Result served from cache"))
            return replace(cached, from_cache=True)

    try:
        root = clone_repository(url, Path(dest_parent))
    except Exception as e:
        emit(ProgressEvent("error", str(e)))
        raise
    emit(ProgressEvent("clone", "Cloning complete"))

    result = digest_repository(
        root, summarize,
        policy=policy,
        capacity=capacity,
        max_tokens=max_tokens,
        synthesize=synthesize,
        concurrency=concurrency,
        on_progress=on_progress,
    )
    if cache is not None:
        cache.set_with_ttl(url, result, ttl_seconds)
    return result
