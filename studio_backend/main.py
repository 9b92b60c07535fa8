"""
Studio backend application with Swagger/OpenAPI documentation.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio_backend.routers import admin_router, auth_router, media_router, website_router

# ============= FastAPI App with OpenAPI =============
app = FastAPI(
    title="Studio Admin API",
    description="""
## Overview

Backend for a photography/videography studio site. A Google Sheets document
is the database and Google Drive stores the images.

### Website (public)
- Site content assembled from the content sheets
- Rental availability and booking requests

### Admin (Google sign-in)
- Sheet data with fresh Drive thumbnail links
- Add / update / delete rows, with Drive cleanup on delete
- Image uploads into the Drive asset folder

### Auth
- OAuth code exchange, refresh and revocation for the admin front end

### Media
- Proxy for public Drive images
    """,
    version="10.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# ============= CORS =============
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============= Routers =============
app.include_router(website_router.router)
app.include_router(admin_router.router)
app.include_router(auth_router.router)
app.include_router(media_router.router)


# ============= Root Endpoint =============
@app.get(
    "/",
    tags=["Root"],
    summary="API Root",
)
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Studio Admin API",
        "version": "10.0.0",
        "docs": "/docs",
        "endpoints": {
            "website": "/api/website",
            "admin": "/api/admin",
            "auth": "/api/auth",
            "media": "/api/media",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
