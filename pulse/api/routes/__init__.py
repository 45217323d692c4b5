from fastapi import FastAPI

from . import admin, auth, dashboard, health, hr, survey


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(hr.router)
    app.include_router(auth.router)
    app.include_router(survey.router)
    app.include_router(dashboard.router)
    app.include_router(admin.router)
