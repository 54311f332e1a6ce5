"""Host note store adapters."""

from notegit.host.base import HostStore
from notegit.host.joplin_client import JoplinClient

__all__ = ["HostStore", "JoplinClient"]
