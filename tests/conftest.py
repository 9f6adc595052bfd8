import logging

import pytest

from catalog_fakes import BASE_URL, FakeCatalog
from shared.clients.catalog.shreddr.CatalogClientShreddr import CatalogClientShreddr
from shared.helper.HelperConfig import HelperConfig


@pytest.fixture
def helper_config(monkeypatch) -> HelperConfig:
    monkeypatch.setenv("CATALOG_SHREDDR_BASE_URL", BASE_URL)
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.delenv("CATALOG_SHREDDR_API_KEY", raising=False)
    monkeypatch.delenv("CATALOG_ENGINE", raising=False)
    monkeypatch.delenv("BATCH_CONCURRENCY", raising=False)
    monkeypatch.delenv("JOB_POLL_INTERVAL", raising=False)
    return HelperConfig(logger=logging.getLogger("tests"))


@pytest.fixture
def boot_catalog(helper_config):
    """Returns a coroutine function that boots a shreddr client against a FakeCatalog."""
    async def _boot(fake: FakeCatalog) -> CatalogClientShreddr:
        client = CatalogClientShreddr(helper_config=helper_config)
        await client.boot(transport=fake.transport())
        return client
    return _boot
