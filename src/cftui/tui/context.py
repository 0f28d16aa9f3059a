"""Runtime state shared by every view: settings, storage and the API client."""

from dataclasses import dataclass

from cftui.client import CodeforcesClient
from cftui.judge import DEFAULT_TIMEOUT
from cftui.models import Settings
from cftui.storage import Storage, Workspace


@dataclass
class Context:
    settings: Settings
    storage: Storage
    client: CodeforcesClient
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def load(cls, storage: Storage, timeout: float = DEFAULT_TIMEOUT) -> "Context":
        settings = storage.get_settings()
        client = CodeforcesClient(key=settings.key, secret=settings.secret)
        return cls(settings=settings, storage=storage, client=client, timeout=timeout)

    @property
    def workspace(self) -> Workspace:
        """Raises NoConfigItemError if home_dir isn't configured."""
        return Workspace(self.settings.home_dir)
