"""
FILE DESCRIPTION: Job orchestration: per-job context, deadline, and the frontier loop.
KEY FUNCTIONS/CLASSES: CrawlContext, Deadline, CrawlState, CrawlSupervisor, run_crawl
"""

import os
import time
from datetime import datetime, timezone
from enum import Enum

import psutil

from snapcrawler.core import GLOBAL_TIMEOUT, MAX_PAGES, PAGE_TIMEOUT, logger
from snapcrawler.errors import JobTimeout, SeedExcluded
from snapcrawler.frontier import Frontier
from snapcrawler.models import CrawlJob, CrawlResult, PageError
from snapcrawler.policy import ScopePolicy
from snapcrawler.processor import PageProcessor
from snapcrawler.url_utils import canonical_host, canonicalize
from snapcrawler.validation import check_host, validate_seed_url


class CrawlState(Enum):
    RUNNING = "RUNNING"
    DRAINING = "DRAINING"
    DONE = "DONE"


class Deadline:
    """Global job deadline on a monotonic clock."""

    def __init__(self, at, clock=time.monotonic):
        self.at = at
        self.clock = clock

    @property
    def remaining(self):
        return max(0.0, self.at - self.clock())

    @property
    def expired(self):
        return self.clock() >= self.at


class CrawlContext:
    """
    Everything one job needs, built once per job and passed explicitly.
    Entering the context opens the renderer's browser; leaving it closes the
    browser on every exit path (success, error or timeout).
    """

    def __init__(self, renderer, store, policy=None, max_pages=MAX_PAGES,
                 global_timeout=GLOBAL_TIMEOUT, page_timeout=PAGE_TIMEOUT, clock=time.monotonic):
        self.renderer = renderer
        self.store = store
        self.policy = policy or ScopePolicy()
        self.max_pages = max_pages
        self.global_timeout = global_timeout
        self.page_timeout = page_timeout
        self.clock = clock

    def new_job(self, seed) -> CrawlJob:
        return CrawlJob(
            seed=seed,
            max_pages=self.max_pages,
            page_timeout=self.page_timeout,
            deadline=self.clock() + self.global_timeout,
        )

    def __enter__(self):
        self.renderer.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.renderer.close()
        return False


class CrawlSupervisor:
    """
    FLOW: seed the frontier -> pop URLs in FIFO order -> scope check ->
    PageProcessor -> record artifacts / errors -> enqueue eligible links ->
    stop on empty frontier, visited cap or deadline.
    A failing page is recorded and the loop moves on; it never ends the job.
    """

    def __init__(self, job: CrawlJob, context: CrawlContext, processor: PageProcessor = None):
        self.job = job
        self.context = context
        self.policy = context.policy
        self.processor = processor or PageProcessor(context.renderer, context.store)
        self.frontier = Frontier(job.max_pages)
        self.deadline = Deadline(job.deadline, context.clock)
        self.seed_host = canonical_host(job.seed)
        self.state = CrawlState.RUNNING

    def log(self, level, msg):
        getattr(logger, level)(msg, extra={'context': 'supervisor'})

    def _should_stop(self, result):
        if self.deadline.expired:
            result.timed_out = True
            self.log("warning", f"deadline reached after {result.pages_visited} page(s)")
            return True
        if self.frontier.is_full:
            self.log("info", f"page cap of {self.job.max_pages} reached")
            return True
        if self.frontier.is_empty():
            return True
        return False

    def _visit(self, url, timeout, result):
        self.log("info", f"visiting {url} ({self.frontier.visited_count}/{self.job.max_pages})")
        try:
            outcome = self.processor.process(url, timeout)
        except Exception as e:
            self.log("error", f"unexpected error processing {url}: {e}")
            result.per_page_errors.append(PageError(url, f"{type(e).__name__}: {e}"))
            return ()
        finally:
            result.pages_visited += 1

        if not outcome.ok:
            result.per_page_errors.append(PageError(outcome.url, outcome.reason))
            return ()
        result.artifacts.extend(outcome.artifacts)
        result.per_page_errors.extend(outcome.errors)
        return outcome.discovered

    def _enqueue_discovered(self, links):
        added = 0
        for link in links:
            if self.frontier.is_full:
                break
            allowed, reason = self.policy.eval(link, self.seed_host)
            if not allowed:
                self.log("debug", f"not enqueued ({reason}): {link}")
                self.frontier.reject(link)
                continue
            if self.frontier.enqueue(link):
                added += 1
        return added

    def run(self) -> CrawlResult:
        result = CrawlResult(seed=self.job.seed)
        self.frontier.enqueue(self.job.seed)

        while self.state is CrawlState.RUNNING:
            if self._should_stop(result):
                self.state = CrawlState.DRAINING
                break

            url = self.frontier.dequeue_next()
            if not self.policy.is_eligible(url, self.seed_host):
                self.log("info", f"skipped out-of-scope {url}")
                self.frontier.mark_visited(url)
                continue
            # Playwright reads a zero timeout as "wait forever"
            timeout = min(self.job.page_timeout, self.deadline.remaining)
            if timeout <= 0:
                result.timed_out = True
                self.state = CrawlState.DRAINING
                break
            if not self.frontier.mark_visited(url):
                self.state = CrawlState.DRAINING
                break

            discovered = self._visit(url, timeout, result)

            if self.deadline.expired:
                # The in-flight page is finished; nothing new starts
                result.timed_out = True
                self.state = CrawlState.DRAINING
                break
            added = self._enqueue_discovered(discovered)
            self.log("debug", f"{added} new URL(s) queued from {url}")

        self.state = CrawlState.DONE
        result.finished_at = datetime.now(timezone.utc)
        self._log_summary(result)

        if result.timed_out and result.pages_visited == 0:
            raise JobTimeout("crawl deadline passed before any page completed")
        return result

    def _log_summary(self, result):
        stats = self.frontier.get_stats()
        rss_mb = psutil.Process(os.getpid()).memory_info().rss / 1024 / 1024
        self.log(
            "info",
            f"CRAWL SUMMARY seed={self.job.seed} visited={result.pages_visited} "
            f"artifacts={len(result.artifacts)} errors={len(result.per_page_errors)} "
            f"timed_out={result.timed_out} queue_left={stats['queue_size']} "
            f"policy={self.policy.get_stats()} rss={rss_mb:.1f}MB",
        )


def prepare_seed(raw_url, policy) -> str:
    """Validate, canonicalize and scope-check a caller-supplied seed."""
    seed = canonicalize(validate_seed_url(raw_url))
    check_host(canonical_host(seed))
    keyword = policy.matched_keyword(seed)
    if keyword:
        raise SeedExcluded(f"seed URL matches excluded keyword '{keyword}'")
    return seed


def run_crawl(raw_url, context: CrawlContext) -> CrawlResult:
    """
    Seed validation errors are raised before the browser is opened.
    The browser is opened once for the job and always closed.
    """
    seed = prepare_seed(raw_url, context.policy)
    job = context.new_job(seed)
    logger.info(f"starting crawl of {seed} (max_pages={job.max_pages})", extra={'context': 'job'})
    with context:
        return CrawlSupervisor(job, context).run()
