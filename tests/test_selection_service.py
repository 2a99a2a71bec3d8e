import pytest

from treasure_hunt.models.enums import SelectionMode
from treasure_hunt.services.catalog_service import CatalogService
from treasure_hunt.services.selection_service import (
    ByNameSelection, RandomUncollectedSelection, ScopedRandomSelection, build_selection_policy
)


def test_scoped_selection_returns_the_only_uncollected_candidate(catalog) -> None:
    policy = ScopedRandomSelection(7)

    for _ in range(10):
        assert policy.select(CatalogService(catalog)).id == 1


def test_global_selection_returns_none_when_everything_is_collected(all_collected) -> None:
    assert RandomUncollectedSelection().select(CatalogService(all_collected)) is None


def test_by_name_selection_hit_and_miss(catalog) -> None:
    service = CatalogService(catalog)

    assert ByNameSelection("Treasure 2").select(service).id == 2
    assert ByNameSelection("Nope").select(service) is None


def test_selection_returns_a_snapshot_unaffected_by_later_writes(catalog) -> None:
    service = CatalogService(catalog)
    selected = ScopedRandomSelection(7).select(service)

    service.mark_collected(selected.id)

    assert selected.is_collected is False
    with pytest.raises(Exception):
        selected.is_collected = True


def test_scoped_selection_without_fallback_stays_in_scope(catalog) -> None:
    service = CatalogService(catalog)
    service.mark_collected(1)

    assert ScopedRandomSelection(7).select(service) is None


def test_scoped_selection_with_fallback_uses_whole_catalog(catalog) -> None:
    service = CatalogService(catalog)
    service.mark_collected(1)

    treasure = ScopedRandomSelection(7, fallback_to_global=True).select(service)

    assert treasure.id in {3, 4}


def test_build_selection_policy_variants() -> None:
    assert isinstance(build_selection_policy(SelectionMode.RANDOM), RandomUncollectedSelection)
    assert isinstance(build_selection_policy("by_name", name="Chalk"), ByNameSelection)

    scoped = build_selection_policy(SelectionMode.SCOPED, sub_zone_id=7, fallback_to_global=True)
    assert isinstance(scoped, ScopedRandomSelection)
    assert scoped.sub_zone_id == 7
    assert scoped.fallback_to_global is True


def test_build_selection_policy_requires_its_argument() -> None:
    with pytest.raises(ValueError):
        build_selection_policy(SelectionMode.BY_NAME)
    with pytest.raises(ValueError):
        build_selection_policy(SelectionMode.SCOPED)
