"""Global state for the HTTP server."""

from ..areas import AreaStore

# Store served by the API
store: AreaStore = AreaStore()


def configure(new_store: AreaStore) -> None:
    """Install the store the API serves."""
    global store
    store = new_store
