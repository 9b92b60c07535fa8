"""Router exports."""
from studio_backend.routers import admin_router, auth_router, media_router, website_router

__all__ = ["admin_router", "auth_router", "media_router", "website_router"]
