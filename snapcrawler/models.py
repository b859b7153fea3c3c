from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple, Union


class ArtifactKind(Enum):
    HTML = "html"
    SCREENSHOT = "screenshots"

    @property
    def prefix(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return "html" if self is ArtifactKind.HTML else "jpeg"

    @property
    def content_type(self) -> str:
        return "text/html" if self is ArtifactKind.HTML else "image/jpeg"


@dataclass(frozen=True)
class CrawlJob:
    """
    Parameters of one crawl. Immutable once started.
    deadline is an instant on the supervisor's monotonic clock.
    """
    seed: str
    max_pages: int
    page_timeout: float
    deadline: float


@dataclass(frozen=True)
class PageArtifact:
    """
    One persisted capture of a visited page.
    Invariant: storage_key is "<kind prefix>/<name>".
    """
    source_url: str
    kind: ArtifactKind
    size_bytes: int
    storage_key: str
    public_ref: str

    @property
    def name(self) -> str:
        return self.storage_key.rsplit("/", 1)[-1]

    def describe(self) -> dict:
        return {"name": self.name, "url": self.public_ref}


@dataclass(frozen=True)
class RenderedPage:
    """Output of a PageRenderer for one URL."""
    url: str
    final_url: str
    html: str
    screenshot: bytes
    links: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PageError:
    url: str
    reason: str

    def describe(self) -> dict:
        return {"url": self.url, "reason": self.reason}


@dataclass(frozen=True)
class PageSuccess:
    """
    Page rendered. Artifacts may be empty if both captures exceeded their caps;
    errors holds non-fatal storage failures.
    """
    url: str
    artifacts: Tuple[PageArtifact, ...] = ()
    discovered: Tuple[str, ...] = ()
    errors: Tuple[PageError, ...] = ()

    ok = True


@dataclass(frozen=True)
class PageFailure:
    url: str
    reason: str

    ok = False


PageOutcome = Union[PageSuccess, PageFailure]


@dataclass
class CrawlResult:
    """Built incrementally by the supervisor, returned once at job end."""
    seed: str
    pages_visited: int = 0
    artifacts: List[PageArtifact] = field(default_factory=list)
    per_page_errors: List[PageError] = field(default_factory=list)
    timed_out: bool = False
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    def files(self, kind: ArtifactKind) -> List[dict]:
        return [a.describe() for a in self.artifacts if a.kind is kind]

    @property
    def html_files(self) -> List[dict]:
        return self.files(ArtifactKind.HTML)

    @property
    def screenshot_files(self) -> List[dict]:
        return self.files(ArtifactKind.SCREENSHOT)


# === REQUESTS ===

@dataclass(frozen=True)
class StartCrawl:
    url: str
    email: Optional[str] = None


@dataclass(frozen=True)
class DownloadArchive:
    kind: ArtifactKind
    names: Tuple[str, ...]


CrawlRequest = Union[StartCrawl, DownloadArchive]
