"""FastAPI application assembly."""

from fastapi import FastAPI

from api.actions import create_actions_router
from api.data import create_data_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware


def create_app(services: dict) -> FastAPI:
    """
    Build the HTTP app around a service map (see Workspace.services()).

    Usage:
        workspace = build_workspace()
        app = create_app(workspace.services())
    """
    app = FastAPI(title="invoicedesk")
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")
    return app
