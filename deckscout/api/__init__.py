from deckscout.api.catalog import router as catalog_router
from deckscout.api.session import router as session_router

__all__ = ["catalog_router", "session_router"]
