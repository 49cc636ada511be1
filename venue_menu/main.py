"""
Venue menu service.
Run with:  uvicorn venue_menu.main:app --reload

⚠️  With SEED_DEMO_DATA=true (the default) startup creates demo accounts
    and a demo venue, see venue_menu/db/seeder.py. Turn it off in production.
"""
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from venue_menu.core.logging_config import configure_logging
from venue_menu.core.config import settings
from venue_menu.core.dependencies import db_dependency
from venue_menu.core.exceptions import register_exception_handlers
from venue_menu.api.v1.router import api_router
from venue_menu.db.database import init_db
from venue_menu.db.seeder import seed_demo_data

configure_logging()
logger = logging.getLogger(__name__)


def _on_startup() -> None:
    logger.info(
        "Starting %s %s database=%s strict_reorder=%s",
        settings.APP_NAME,
        settings.APP_VERSION,
        settings.database_path,
        settings.STRICT_REORDER,
    )
    init_db()
    if settings.SEED_DEMO_DATA:
        seed_demo_data()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        description=(
            "Menu management for venues: nested categories, densely ordered "
            "items, and a public guest menu."
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/health", tags=["Health"])
    def health(conn=Depends(db_dependency)) -> dict:
        """Liveness plus a round trip to the database."""
        conn.execute("SELECT 1").fetchone()
        return {"status": "healthy", "database": "ok"}

    app.on_event("startup")(_on_startup)
    return app


app = create_app()
