from shared.clients.catalog.CatalogClientInterface import CatalogClientInterface
from shared.clients.catalog.models.Tag import TagRecord

UNKNOWN_TAG_NAME = "unknown tag"
LIGHT_TEXT = "var(--light)"
DARK_TEXT = "var(--dark)"


class TagCache:
    """
    Session copy of the catalog's tags, owned by one controller.

    Documents may reference tags that are missing or deactivated. Those still
    resolve (missing ones to an "unknown tag" placeholder) but only active tags
    are offered for filtering.
    """

    def __init__(self, catalog_client: CatalogClientInterface) -> None:
        self._catalog = catalog_client
        self._tags: dict[int, TagRecord] = {}
        self._loaded = False

    def is_loaded(self) -> bool:
        return self._loaded

    async def load(self) -> None:
        """
        Raises:
            TransportError: If the tag list cannot be fetched.
            DecodeError: If the tag list cannot be parsed.
        """
        tags = await self._catalog.do_fetch_tags()
        self._tags = {tag.id: tag for tag in tags}
        self._loaded = True

    def resolve(self, tag_id: int) -> TagRecord:
        tag = self._tags.get(tag_id)
        if tag is None:
            return TagRecord(engine=self._catalog.get_engine_name(), id=tag_id, name=UNKNOWN_TAG_NAME)
        return tag

    def filterable_tags(self) -> list[TagRecord]:
        return sorted(
            (tag for tag in self._tags.values() if not tag.deactivated),
            key=lambda tag: tag.name.lower(),
        )

    @staticmethod
    def text_color(tag: TagRecord) -> str:
        """Pick light or dark text for the tag's background color."""
        return LIGHT_TEXT if is_dark(tag.color) else DARK_TEXT


def is_dark(color: str | None) -> bool:
    """Return True for a dark "#rgb"/"#rrggbb" color. Anything unparsable counts as light.

    Uses the HSP brightness model, threshold 127.5.
    """
    if not color or not color.startswith("#"):
        return False
    hex_part = color[1:]
    if len(hex_part) == 3:
        hex_part = "".join(c * 2 for c in hex_part)
    if len(hex_part) != 6:
        return False
    try:
        r, g, b = (int(hex_part[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return False
    brightness = (0.299 * r * r + 0.587 * g * g + 0.114 * b * b) ** 0.5
    return brightness <= 127.5
