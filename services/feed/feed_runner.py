"""Feed runner entry point.

Loads the document feed the same way the browser view does (page by page,
year-grouped, narrowed by the persisted tag filters) and prints it to the log.
Handy to check what a filter set or sort order will show.

Usage:
    python -m services.feed.feed_runner

Environment:
    CATALOG_SHREDDR_BASE_URL   catalog base url (required)
    FEED_ORDER                 0 imported date, 1 document date, unset for server default
    FEED_QUERY                 free-text query
    FEED_MAX_PAGES             stop after this many pages (default 100)
    FEED_STORAGE_DIR           directory of the session files (default ./sessions)
    FEED_SESSION_ID            session whose filters are used (default "default")
"""

import asyncio

from shared.clients.catalog.CatalogClientManager import CatalogClientManager
from shared.clients.catalog.models.Query import SortOrder
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.storage.SessionStorageFile import SessionStorageFile
from services.feed.FeedController import FeedController
from services.feed.InfiniteScrollDriver import TriggerOutcome
from services.feed.models.FeedItem import YearSeparator


def read_order(config: HelperConfig) -> SortOrder | None:
    raw = config.get_string_val("FEED_ORDER", default="")
    if not raw:
        return None
    try:
        return SortOrder(int(raw))
    except ValueError:
        raise ValueError(f"FEED_ORDER must be 0 or 1, got '{raw}'")


async def main() -> None:
    """Print the feed until it ends or FEED_MAX_PAGES is reached."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)
    catalog_client = CatalogClientManager(helper_config=config).get_client()
    storage = SessionStorageFile(
        storage_dir=config.get_string_val("FEED_STORAGE_DIR", default="sessions"),
        session_id=config.get_string_val("FEED_SESSION_ID", default="default"),
    )
    max_pages = int(config.get_number_val("FEED_MAX_PAGES", default=100))

    try:
        await catalog_client.boot()
        await catalog_client.do_healthcheck()

        controller = FeedController(
            helper_config=config,
            catalog_client=catalog_client,
            storage=storage,
            order=read_order(config),
            query=config.get_string_val("FEED_QUERY", default="") or None,
        )
        outcome = await controller.start()
        logger.info("Active tag filters: %s", [controller.resolve_tag(t).name for t in controller.get_filters()], color="cyan")

        while controller.has_next_page() and controller.get_cursor().page < max_pages:
            if outcome == TriggerOutcome.FAILED:
                logger.error("Fetching page %d failed: %s. Aborting.", controller.get_cursor().page, controller.get_last_error())
                return
            outcome = await controller.on_proximity()

        for item in controller.get_items():
            if isinstance(item, YearSeparator):
                logger.info("== %s ==", item.label, color="magenta")
                continue
            tag_names = ", ".join(controller.resolve_tag(t).name for t in item.document.tags)
            logger.info("  #%d %s [%s]", item.document.id, item.document.title, tag_names)

        logger.info("%d documents in %d pages.", len(controller.get_rendered_ids()), controller.get_cursor().page, color="green")
    finally:
        await catalog_client.close()


if __name__ == "__main__":
    asyncio.run(main())
