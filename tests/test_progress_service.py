from treasure_hunt.services.catalog_service import CatalogService
from treasure_hunt.services.progress_service import ProgressService


def test_catalog_progress_matches_store(catalog) -> None:
    progress = ProgressService(catalog).get_catalog_progress()

    assert [z.code for z in progress.zones] == ["W15", "W17"]
    lab = progress.zones[0].sub_zones[0]
    assert (lab.name, lab.progress.collected, lab.progress.total) == ("Lab", 1, 2)
    assert (progress.progress.collected, progress.progress.total) == (2, 5)


def test_sub_zone_sums_equal_global_progress(catalog) -> None:
    service = ProgressService(catalog)
    CatalogService(catalog).mark_collected(3)

    progress = service.get_catalog_progress()
    sub_zones = [s for z in progress.zones for s in z.sub_zones]

    assert sum(s.progress.collected for s in sub_zones) == progress.progress.collected
    assert sum(s.progress.total for s in sub_zones) == progress.progress.total
    assert sum(z.progress.collected for z in progress.zones) == progress.progress.collected


def test_progress_is_recomputed_after_a_collection(catalog) -> None:
    service = ProgressService(catalog)
    before = service.get_catalog_progress()

    CatalogService(catalog).mark_collected(4)
    after = service.get_catalog_progress()

    assert after.progress.collected == before.progress.collected + 1
    assert str(after.progress) == "3 / 5"


def test_treasure_list_header(catalog) -> None:
    listing = ProgressService(catalog).get_treasure_list(7)

    assert listing.zone_code == "W15"
    assert listing.sub_zone.name == "Lab"
    assert [t.id for t in listing.items] == [1, 2]
    assert (listing.progress.collected, listing.progress.total) == (1, 2)
    assert listing.progress.ratio == 0.5


def test_treasure_list_unknown_sub_zone(catalog) -> None:
    assert ProgressService(catalog).get_treasure_list(999) is None


def test_empty_sub_zone_ratio_is_zero(db) -> None:
    from tests.conftest import add_catalog

    add_catalog(db, [(1, "W1", "Empty", [(3, "Nothing here", {})])])

    progress = ProgressService(db).get_catalog_progress()

    assert progress.zones[0].sub_zones[0].progress.ratio == 0.0
    assert progress.progress.total == 0
