"""Unit tests for the property collection and seed merging."""

import pytest

from homefit.core.exceptions import InvalidParameterError, UnknownPropertyError
from homefit.models.property import PropertyRecord
from homefit.services.collection import PropertyCollection, backfill


@pytest.fixture
def seed():
    return [
        PropertyRecord(
            zipcode="92501", name="Riverside", city="Riverside", region="Inland Empire",
            median_price=420_000, expected_rent=2_600, latitude=33.98, longitude=-117.37,
        ),
        PropertyRecord(
            zipcode="92401", name="San Bernardino", city="San Bernardino", region="Inland Empire",
            median_price=380_000, expected_rent=2_100,
        ),
    ]


class TestAdd:
    """Tests for user-entered records."""

    def test_add(self):
        collection = PropertyCollection()
        assert collection.add(PropertyRecord(zipcode="92101", city="San Diego", median_price=650_000))
        assert "92101" in collection
        assert collection.version == 1

    def test_name_defaults_to_city(self):
        collection = PropertyCollection()
        collection.add(PropertyRecord(zipcode="92101", city="San Diego", median_price=650_000))
        assert collection.get("92101").name == "San Diego"

    def test_requires_city_and_price(self):
        collection = PropertyCollection()
        assert not collection.add(PropertyRecord(zipcode="92101", median_price=650_000))
        assert not collection.add(PropertyRecord(zipcode="92101", city="San Diego"))
        assert len(collection) == 0
        assert collection.version == 0

    def test_duplicate_key_rejected(self):
        collection = PropertyCollection()
        record = PropertyRecord(zipcode="92101", city="San Diego", median_price=650_000)
        assert collection.add(record)
        assert not collection.add(record.model_copy(update={"median_price": 1.0}))
        assert collection.get("92101").median_price == 650_000

    def test_legacy_record_keyed_by_name(self):
        collection = PropertyCollection()
        collection.add(PropertyRecord(name="Silver Lake", city="Los Angeles", median_price=1_100_000))
        assert "Silver Lake" in collection


class TestUpdateRemove:

    def test_update_revalidates(self, seed):
        collection = PropertyCollection(seed)
        updated = collection.update("92501", expected_rent="2800", monthly_hoa=None)
        assert updated.expected_rent == 2_800
        assert updated.monthly_hoa == 0.0
        assert collection.get("92501").expected_rent == 2_800

    def test_update_keeps_position(self, seed):
        collection = PropertyCollection(seed)
        collection.update("92501", zipcode="92503")
        assert [r.key for r in collection] == ["92503", "92401"]

    def test_update_unknown_key(self):
        with pytest.raises(UnknownPropertyError) as exc:
            PropertyCollection().update("00000", median_price=1)
        assert exc.value.key == "00000"

    def test_update_onto_existing_key(self, seed):
        collection = PropertyCollection(seed)
        version = collection.version
        with pytest.raises(InvalidParameterError) as exc:
            collection.update("92501", zipcode="92401")
        assert exc.value.param_name == "zipcode"
        assert len(collection) == 2
        assert collection.get("92501").city == "Riverside"
        assert collection.get("92401").city == "San Bernardino"
        assert collection.version == version

    def test_remove(self, seed):
        collection = PropertyCollection(seed)
        assert collection.remove("92501")
        assert not collection.remove("92501")
        assert len(collection) == 1


class TestMergeSeed:
    """Seed merging is idempotent and never overwrites user edits."""

    def test_first_merge_adds(self, seed):
        collection = PropertyCollection()
        report = collection.merge_seed(seed)
        assert report.added == 2
        assert len(collection) == 2

    def test_merge_is_idempotent(self, seed):
        collection = PropertyCollection()
        collection.merge_seed(seed)
        before = collection.snapshot()
        version = collection.version
        report = collection.merge_seed(seed)
        assert report.added == 0
        assert report.backfilled == 0
        assert report.unchanged == 2
        assert collection.snapshot() == before
        assert collection.version == version

    def test_user_edits_preserved_and_gaps_backfilled(self, seed):
        """A user's record keeps its price but gains seed coordinates."""
        user = PropertyRecord(zipcode="92501", city="Riverside", median_price=455_000, monthly_hoa=120)
        collection = PropertyCollection([user])
        report = collection.merge_seed(seed)

        merged = collection.get("92501")
        assert report.backfilled == 1
        assert merged.median_price == 455_000
        assert merged.monthly_hoa == 120
        assert merged.expected_rent == 2_600
        assert merged.coordinate == (33.98, -117.37)
        assert merged.region == "Inland Empire"

    def test_backfill_then_idempotent(self, seed):
        user = PropertyRecord(zipcode="92501", city="Riverside", median_price=455_000)
        collection = PropertyCollection([user])
        collection.merge_seed(seed)
        assert collection.merge_seed(seed).backfilled == 0

    def test_keyless_seed_entries_skipped(self):
        collection = PropertyCollection()
        assert collection.merge_seed([PropertyRecord(median_price=1)]).added == 0

    def test_backfill_helper_returns_same_object_when_complete(self, seed):
        assert backfill(seed[0], seed[0]) is seed[0]

    def test_clear_seeded(self, seed):
        collection = PropertyCollection()
        collection.merge_seed(seed)
        collection.add(PropertyRecord(zipcode="92101", city="San Diego", median_price=650_000))
        assert collection.clear_seeded(seed) == 2
        assert [r.key for r in collection] == ["92101"]


class TestFacets:

    def test_regions_and_cities(self, sample_records):
        collection = PropertyCollection(sample_records)
        assert collection.available_regions() == ["Inland Empire", "SoCal - LA", "SoCal - OC"]
        assert collection.available_cities("Inland Empire") == ["Riverside", "San Bernardino"]
        assert len(collection.available_cities()) == 4
