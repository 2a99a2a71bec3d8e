# treasure_hunt/services/selection_service.py
import logging
from typing import Optional

from treasure_hunt.models.enums import SelectionMode
from treasure_hunt.schemas.catalog import TreasureResponse
from treasure_hunt.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


class SelectionPolicy:
    """
    Decides which treasure a session offers.

    select() runs once per session, before the tracking wait, and returns a
    frozen snapshot or None when there is nothing to offer.
    """

    mode: SelectionMode

    def select(self, catalog: CatalogService) -> Optional[TreasureResponse]:
        raise NotImplementedError

    @staticmethod
    def _snapshot(treasure) -> Optional[TreasureResponse]:
        if treasure is None:
            return None
        return TreasureResponse.model_validate(treasure)


class ByNameSelection(SelectionPolicy):
    """Offer one specific treasure, looked up by exact name"""

    mode = SelectionMode.BY_NAME

    def __init__(self, name: str):
        self.name = name

    def select(self, catalog: CatalogService) -> Optional[TreasureResponse]:
        treasure = self._snapshot(catalog.get_treasure_by_name(self.name))
        if treasure is None:
            logger.info(f"No treasure named {self.name!r}")
        return treasure

    def __repr__(self):
        return f"<ByNameSelection {self.name!r}>"


class RandomUncollectedSelection(SelectionPolicy):
    """Offer any uncollected treasure from the whole catalog"""

    mode = SelectionMode.RANDOM

    def select(self, catalog: CatalogService) -> Optional[TreasureResponse]:
        return self._snapshot(catalog.get_random_uncollected())

    def __repr__(self):
        return "<RandomUncollectedSelection>"


class ScopedRandomSelection(SelectionPolicy):
    """Offer an uncollected treasure from the sub-zone the player chose to explore"""

    mode = SelectionMode.SCOPED

    def __init__(self, sub_zone_id: int, fallback_to_global: bool = False):
        self.sub_zone_id = sub_zone_id
        self.fallback_to_global = fallback_to_global

    def select(self, catalog: CatalogService) -> Optional[TreasureResponse]:
        treasure = self._snapshot(catalog.get_random_uncollected(self.sub_zone_id))
        if treasure is None and self.fallback_to_global:
            logger.info(f"Sub-zone {self.sub_zone_id} has nothing left, falling back to the whole catalog")
            treasure = self._snapshot(catalog.get_random_uncollected())
        return treasure

    def __repr__(self):
        return f"<ScopedRandomSelection sub_zone={self.sub_zone_id} fallback={self.fallback_to_global}>"


def build_selection_policy(
    mode: SelectionMode,
    name: Optional[str] = None,
    sub_zone_id: Optional[int] = None,
    fallback_to_global: bool = False,
) -> SelectionPolicy:
    """
    Build the selection policy for a mode.

    Raises:
        ValueError: If the mode is missing the argument it needs
    """
    mode = SelectionMode(mode)

    if mode == SelectionMode.BY_NAME:
        if not name:
            raise ValueError("by-name selection needs a treasure name")
        return ByNameSelection(name)

    if mode == SelectionMode.SCOPED:
        if sub_zone_id is None:
            raise ValueError("scoped selection needs a sub-zone id")
        return ScopedRandomSelection(sub_zone_id, fallback_to_global=fallback_to_global)

    return RandomUncollectedSelection()
