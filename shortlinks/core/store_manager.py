"""
Link Store Lifecycle

The link store is built once per application instance on startup, kept on
``app.state`` and handed to endpoints through the ``get_link_store``
dependency. Shutdown disposes the database engine.
"""

import logging

from fastapi import FastAPI, Request

from shortlinks.core.setting import settings
from shortlinks.db.session import create_engine, create_session_maker, create_tables
from shortlinks.db.sqlite_adapter import get_database_adapter
from shortlinks.services.link_store import LinkStore

logger = logging.getLogger(__name__)


async def initialize_store(app: FastAPI) -> LinkStore:
    """
    Create the engine, ensure tables exist and attach a LinkStore to ``app``.

    Returns:
        The LinkStore stored on app.state
    """
    if getattr(app.state, "link_store", None) is not None:
        logger.warning("Link store already initialized")
        return app.state.link_store

    adapter = get_database_adapter()
    engine = create_engine(settings.DATABASE_URL, adapter=adapter)

    try:
        await create_tables(engine)
    except Exception:
        logger.error("Failed to prepare link store database", exc_info=True)
        await engine.dispose()
        raise

    app.state.engine = engine
    app.state.link_store = LinkStore(
        create_session_maker(engine),
        storage_key=settings.STORAGE_KEY,
        adapter=adapter,
    )

    logger.info(
        f"Link store initialized: dialect={adapter.get_dialect_name()}, "
        f"key={settings.STORAGE_KEY}"
    )
    return app.state.link_store


async def shutdown_store(app: FastAPI) -> None:
    """Detach the link store and dispose its engine."""
    engine = getattr(app.state, "engine", None)
    app.state.link_store = None
    app.state.engine = None

    if engine is not None:
        logger.info("Shutting down link store")
        await engine.dispose()


def get_link_store(request: Request) -> LinkStore:
    """FastAPI dependency returning the application's LinkStore."""
    store = getattr(request.app.state, "link_store", None)
    if store is None:
        raise RuntimeError("Link store is not initialized; was the startup event run?")
    return store
