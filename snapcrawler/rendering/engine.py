from abc import ABC, abstractmethod

from snapcrawler.models import RenderedPage


class PageRenderer(ABC):
    """
    Abstraction for the underlying browser driver.
    Contractual Requirements for Implementers:
    - MUST acquire the browser in open() and release it, with every open page, in close().
    - MUST abort non-visual resource classes and blocked domains (see interception).
    - MUST wait for load, auto-scroll a bounded number of times, then settle.
    - MUST raise RenderFailure (or any exception) for a page it cannot capture;
      it must stay usable for the next page.
    """

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    @abstractmethod
    def load(self, url: str, timeout: float) -> RenderedPage:
        """
        Load, scroll and snapshot one page within timeout seconds.
        Returns the final HTML, a JPEG screenshot and the page's anchor hrefs.
        """
        pass

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
