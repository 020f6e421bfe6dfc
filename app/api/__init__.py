"""
API module - FastAPI routers and endpoint definitions.

- deps: repository/service providers and auth dependencies
- routes: one router per entity, combined into `api_router`

Usage:
    from app.api.routes import api_router
    app.include_router(api_router, prefix="/api")
"""
