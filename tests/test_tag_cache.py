import asyncio

import pytest

from catalog_fakes import FakeCatalog
from services.feed.TagCache import DARK_TEXT, LIGHT_TEXT, UNKNOWN_TAG_NAME, TagCache, is_dark
from shared.clients.catalog.models.Tag import TagRecord
from shared.clients.catalog.shreddr.CatalogClientShreddr import CatalogClientShreddr

TAGS = [
    {"id": 1, "name": "taxes", "color": "#000000"},
    {"id": 2, "name": "Archive", "color": "#ffffff", "deactivated": True},
    {"id": 3, "name": "Bank", "color": "#fc0"},
]


def _loaded_cache(boot_catalog, tags) -> TagCache:
    async def scenario():
        client = await boot_catalog(FakeCatalog(tags=tags))
        cache = TagCache(client)
        await cache.load()
        return cache
    return asyncio.run(scenario())


def test_filterable_tags_skip_deactivated_and_sort_by_name(boot_catalog):
    cache = _loaded_cache(boot_catalog, TAGS)

    assert cache.is_loaded() is True
    assert [t.name for t in cache.filterable_tags()] == ["Bank", "taxes"]


def test_deactivated_tag_still_resolves(boot_catalog):
    cache = _loaded_cache(boot_catalog, TAGS)

    tag = cache.resolve(2)
    assert tag.name == "Archive"
    assert tag.deactivated is True


def test_missing_tag_resolves_to_placeholder(boot_catalog):
    cache = _loaded_cache(boot_catalog, TAGS)

    tag = cache.resolve(404)
    assert tag.id == 404
    assert tag.name == UNKNOWN_TAG_NAME


def test_unloaded_cache_resolves_everything_to_placeholder(helper_config):
    cache = TagCache(CatalogClientShreddr(helper_config=helper_config))

    assert cache.is_loaded() is False
    assert cache.resolve(1).name == UNKNOWN_TAG_NAME
    assert cache.filterable_tags() == []


@pytest.mark.parametrize(
    "color, dark",
    [
        ("#000000", True),
        ("#000", True),
        ("#1e3a8a", True),
        ("#ffffff", False),
        ("#fc0", False),
        ("#ffcc00", False),
        ("red", False),
        ("#12345", False),
        ("#zzzzzz", False),
        (None, False),
    ],
)
def test_is_dark(color, dark):
    assert is_dark(color) is dark


def test_text_color_contrasts_with_background():
    dark_tag = TagRecord(engine="Shreddr", id=1, name="a", color="#202020")
    light_tag = TagRecord(engine="Shreddr", id=2, name="b", color="#f0f0f0")

    assert TagCache.text_color(dark_tag) == LIGHT_TEXT
    assert TagCache.text_color(light_tag) == DARK_TEXT
