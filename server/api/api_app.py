"""FastAPI application entry point for the feed controller API.

Exposes one feed controller to a browser view over JSON. The view renders
the items, reports viewport proximity and forwards user actions; all feed
state lives here.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
from server.api.routers.BatchRouter import batch_router
from server.api.routers.DocumentRouter import document_router
from server.api.routers.FeedRouter import feed_router
from server.api.routers.FilterRouter import filter_router
from server.api.routers.JobRouter import job_router
from server.api.routers.SelectionRouter import selection_router
from services.feed.FeedController import FeedController
from services.feed.JobStatusPoller import JobStatusPoller
from services.feed.feed_runner import read_order
from shared.clients.catalog.CatalogClientManager import CatalogClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.storage.SessionStorageFile import SessionStorageFile

app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown."""
    app.state.logging = setup_logging()
    app.state.config = HelperConfig(logger=app.state.logging)

    # Initialise the catalog client
    catalog_client = CatalogClientManager(helper_config=app.state.config).get_client()
    await catalog_client.boot()
    await catalog_client.do_healthcheck()

    # Wire up the poller and the controller
    storage = SessionStorageFile(
        storage_dir=app.state.config.get_string_val("FEED_STORAGE_DIR", default="sessions"),
        session_id=app.state.config.get_string_val("FEED_SESSION_ID", default="default"),
    )
    app.state.poller = JobStatusPoller(helper_config=app.state.config, catalog_client=catalog_client)
    app.state.controller = FeedController(
        helper_config=app.state.config,
        catalog_client=catalog_client,
        storage=storage,
        order=read_order(app.state.config),
        query=app.state.config.get_string_val("FEED_QUERY", default="") or None,
        poller=app.state.poller,
    )
    await app.state.controller.start()
    app.state.poller.start()

    app.state.logging.info("Feed API ready.")
    yield

    # Shutdown
    await app.state.poller.stop()
    await catalog_client.close()
    app.state.logging.info("Feed API shut down.")


app = FastAPI(
    title="Shreddr Feed",
    description="Paginated, year-grouped and filterable document feed on top of a shreddr catalog.",
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(feed_router)
app.include_router(filter_router)
app.include_router(selection_router)
app.include_router(batch_router)
app.include_router(document_router)
app.include_router(job_router)


# Server Start
if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("APP_PORT", "8000"))
    setup_logging().info(f"Starting feed API server v{app_version} on port {port}...")
    uvicorn.run(app, host="0.0.0.0", port=port)
