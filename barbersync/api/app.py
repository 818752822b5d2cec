# barbersync/api/app.py

from fastapi import FastAPI

from .. import __version__
from ..services.availability_service import AvailabilityService
from .routes import router


def create_app(service: AvailabilityService) -> FastAPI:
    """Build the HTTP app around an already wired availability service."""
    app = FastAPI(title="barbersync", version=__version__)
    app.state.availability_service = service
    app.include_router(router)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app
