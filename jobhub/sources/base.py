from abc import ABC, abstractmethod

from jobhub.models import FetchResult


class JobSource(ABC):
    name: str = "source"

    @abstractmethod
    def fetch(self) -> FetchResult:
        """Fetch and normalize jobs; failures come back in ``FetchResult.error``."""
