"""Pipeline run: fetch -> ingest -> cluster -> synthesize, one run at a time."""

import logging
import threading
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

from collectors.base import BaseCollector, FetchedArticle
from collectors.rss import RSSCollector
from config import FETCH_CONCURRENCY, MAX_STORIES_PER_RUN
from db.models import Source
from db.repository import Repository
from llm.client import LLMClient
from pipeline.clusterer import cluster_articles
from pipeline.ingest import ingest_articles
from pipeline.models import RunResult
from pipeline.synthesizer import synthesize_story

logger = logging.getLogger(__name__)


class PipelineRunner:
    """Owns the Idle/Running state. A run requested while running is rejected."""

    def __init__(
        self,
        repo: Repository | None = None,
        llm: LLMClient | None = None,
        collector: BaseCollector | None = None,
        max_stories: int = MAX_STORIES_PER_RUN,
        fetch_concurrency: int = FETCH_CONCURRENCY,
    ) -> None:
        self.repo = repo or Repository()
        self.llm = llm or LLMClient()
        self.collector = collector or RSSCollector()
        self.max_stories = max_stories
        self.fetch_concurrency = max(1, fetch_concurrency)
        self._running = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._running.locked()

    @contextmanager
    def _single_flight(self) -> Iterator[bool]:
        acquired = self._running.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                self._running.release()

    def _collect_one(self, source: Source) -> list[FetchedArticle]:
        try:
            return self.collector.collect(source)
        except Exception as e:
            logger.warning("[%s] Collector failed: %s", source.name, e)
            return []

    def _fetch_all(self, sources: list[Source]) -> list[FetchedArticle]:
        """Fetch every source with bounded concurrency; one bad feed costs only itself."""
        fetched: list[FetchedArticle] = []
        workers = min(self.fetch_concurrency, len(sources))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="feed") as pool:
            for articles in pool.map(self._collect_one, sources):
                fetched.extend(articles)
        return fetched

    def _execute(self) -> RunResult:
        sources = [s for s in self.repo.list_sources() if s.is_active and s.rss_url]
        if not sources:
            return RunResult("No active sources with RSS feeds", 0)

        fetched = self._fetch_all(sources)
        logger.info("Fetched %d total articles from %d sources", len(fetched), len(sources))
        if not fetched:
            return RunResult("No new articles found", 0)

        ingest_articles(fetched, self.repo)

        # Cluster everything fetched, not only new rows: recent repeats still count.
        clusters = cluster_articles(fetched, self.llm)
        if len(clusters) > self.max_stories:
            logger.info("Dropping %d clusters over the per-run cap", len(clusters) - self.max_stories)

        stories_created = 0
        for cluster in clusters[: self.max_stories]:
            if synthesize_story(cluster, self.llm, self.repo) is not None:
                stories_created += 1

        return RunResult(f"Pipeline complete. Created {stories_created} stories.", stories_created)

    def run(self) -> RunResult:
        with self._single_flight() as acquired:
            if not acquired:
                logger.info("Pipeline already running, skipping")
                return RunResult("Pipeline already running", 0)

            logger.info("Starting news pipeline")
            try:
                result = self._execute()
            except Exception as e:
                logger.exception("Pipeline failed")
                return RunResult(f"Pipeline failed: {e}", 0, failed=True)

            logger.info(result.message)
            return result


_runner: PipelineRunner | None = None
_runner_lock = threading.Lock()


def get_runner() -> PipelineRunner:
    """Process-wide runner shared by the scheduler and manual triggers."""
    global _runner
    with _runner_lock:
        if _runner is None:
            _runner = PipelineRunner()
        return _runner


def set_runner(runner: PipelineRunner | None) -> None:
    global _runner
    with _runner_lock:
        _runner = runner


def trigger_pipeline_run() -> RunResult:
    """Run the pipeline now, or return immediately if a run is in progress."""
    return get_runner().run()
