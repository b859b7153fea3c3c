"""
Crawl frontier for a single job.
Owns traversal order (FIFO / breadth-first) and de-duplication.
Only canonical URLs go in; callers canonicalize first.

Not thread-safe: one supervisor owns a frontier for the lifetime of a job.
If pages are ever fetched in parallel, enqueue / dequeue_next / mark_visited
become the synchronization boundary.
"""

from collections import deque
import logging

logger = logging.getLogger(__name__)


class Frontier:
    """
    FIFO queue + visited set.
    Invariant: len(visited) <= max_pages; a visited URL is never re-enqueued.
    """

    def __init__(self, max_pages):
        self.max_pages = max_pages
        self.queue = deque()     # FIFO queue for BFS crawling
        self.queued = set()      # URLs currently enqueued
        self.visited = set()     # URLs taken off the queue in this job
        self.rejected = set()    # discovered URLs the scope policy refused

    @property
    def visited_count(self):
        return len(self.visited)

    @property
    def is_full(self):
        return len(self.visited) >= self.max_pages

    def enqueue(self, url) -> bool:
        """
        Returns True if queued. No-op returning False if the URL was already
        visited, queued or rejected, or the visited cap is reached.
        """
        if self.is_full:
            logger.debug(f"enqueue: cap reached, dropping {url}", extra={'context': 'frontier'})
            return False
        if url in self.visited or url in self.queued or url in self.rejected:
            return False

        self.queue.append(url)
        self.queued.add(url)
        logger.debug(
            f"enqueue: queued {url} qsize={len(self.queue)} visited={len(self.visited)}",
            extra={'context': 'frontier'},
        )
        return True

    def dequeue_next(self):
        """Next URL in discovery order, or None when the queue is empty."""
        if not self.queue:
            return None
        url = self.queue.popleft()
        self.queued.discard(url)
        return url

    def mark_visited(self, url) -> bool:
        """Returns False (and records nothing) when the cap is already full."""
        if url in self.visited:
            return True
        if self.is_full:
            return False
        self.visited.add(url)
        return True

    def reject(self, url):
        """Remember an ineligible URL so it is never considered again."""
        if url not in self.visited:
            self.rejected.add(url)

    def is_empty(self):
        return not self.queue

    def get_stats(self):
        return {
            "queue_size": len(self.queue),
            "visited_count": len(self.visited),
            "rejected_count": len(self.rejected),
            "max_pages": self.max_pages,
        }
