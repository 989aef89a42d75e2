"""Router exports for application assembly."""
from .auth import router as auth_router
from .catalog import router as catalog_router
from .friends import router as friends_router
from .mood_posts import router as mood_posts_router
from .profiles import router as profiles_router
from .realtime import router as realtime_router

__all__ = [
    "auth_router",
    "catalog_router",
    "friends_router",
    "mood_posts_router",
    "profiles_router",
    "realtime_router",
]
