"""Job status poller.

Queries the catalog's singleton job queue on a fixed interval and turns the
answer into a StatusNotice for the status area. Purely informational: it never
touches the feed. A failed poll is skipped silently and the display keeps its
previous state until the next successful one.
"""

import asyncio
from typing import Callable

from shared.clients.catalog.CatalogClientInterface import CatalogClientInterface
from shared.clients.catalog.models.JobStatus import JobBusy, JobStatus
from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import CatalogError
from services.feed.models.Status import FINISHED_TEXT, StatusNotice

POLL_INTERVAL = 5.0  # seconds


class JobStatusPoller:
    def __init__(
        self,
        helper_config: HelperConfig,
        catalog_client: CatalogClientInterface,
        on_notice: Callable[[StatusNotice], None] | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._catalog = catalog_client
        self._on_notice = on_notice
        self.interval = float(helper_config.get_number_val("JOB_POLL_INTERVAL", default=POLL_INTERVAL))

        self._last_status: JobStatus | None = None
        self._last_notice: StatusNotice | None = None
        self._task: asyncio.Task | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_last_status(self) -> JobStatus | None:
        return self._last_status

    def get_last_notice(self) -> StatusNotice | None:
        """Returns the notice of the last successful poll, None before the first one."""
        return self._last_notice

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    ##########################################
    ################ CORE ####################
    ##########################################

    async def poll_once(self) -> StatusNotice | None:
        """Fetch the job status once and publish the resulting notice.

        Returns:
            StatusNotice | None: The new notice, or None if this cycle failed.
        """
        try:
            status = await self._catalog.do_fetch_job_status()
        except CatalogError as e:
            self.logging.debug("Job status poll skipped: %s", e)
            return None

        notice = self._build_notice(status)
        self._last_status = status
        self._last_notice = notice
        if self._on_notice is not None:
            self._on_notice(notice)
        return notice

    async def run(self) -> None:
        """Poll forever on the configured interval. Cancel the task to stop."""
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        """Start polling in a background task on the running loop."""
        if self.is_running():
            return
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _build_notice(self, status: JobStatus) -> StatusNotice:
        if isinstance(status, JobBusy):
            text = f"Processing {status.queue_length} documents. {status.current}".strip()
            return StatusNotice(state="busy", text=text, queue_length=status.queue_length)
        if isinstance(self._last_status, JobBusy):
            self.logging.info("Background jobs finished.")
            return StatusNotice(state="finished", text=FINISHED_TEXT)
        return StatusNotice(state="idle")
