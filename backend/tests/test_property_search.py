"""Tests for property search and the owner-name fallback"""
import pytest

from app.models.property import PropertyType, PropertyStatus, FurnishedStatus
from app.services.property_search import (
    PropertySearchResolver,
    SearchFilters,
    escape_like,
    owner_matches,
)
from app.models.owner import PropertyOwner


@pytest.fixture
def portfolio(make_property, broker):
    """Two listings: one found by locality, one only by its owner's name"""
    async def _build():
        kalawad = await make_property(
            broker,
            area="Kalawad Road",
            total_price=6000000,
            owners=[{"owner_name": "Suresh Joshi", "phone_number": "9000000001", "is_current_owner": True}],
        )
        other = await make_property(
            broker,
            area="X",
            property_type=PropertyType.RESIDENTIAL,
            status=PropertyStatus.RENTED,
            bhk=2,
            furnished_status=FurnishedStatus.FURNISHED,
            total_price=5500000,
            survey_no="S-234",
            owners=[{"owner_name": "Ramesh Patel", "phone_number": "9876543210", "is_current_owner": True}],
        )
        return kalawad, other
    return _build


async def search_ids(db, broker, **filters):
    results = await PropertySearchResolver(db, broker.id).search(SearchFilters(**filters))
    return [p.id for p in results]


class TestSearchFilters:
    """Normalisation of incoming filter values"""

    def test_blank_strings_are_absent(self):
        filters = SearchFilters(q="   ", area="", city=" Rajkot ")
        assert filters.q is None
        assert filters.area is None
        assert filters.city == "Rajkot"

    def test_enums_are_kept(self):
        filters = SearchFilters(property_type=PropertyType.PLOT)
        assert filters.property_type is PropertyType.PLOT

    def test_escape_like(self):
        assert escape_like("50%_off") == "50\\%\\_off"


class TestOwnerMatches:
    """In-memory owner matching"""

    def test_name_is_case_insensitive(self):
        owners = [PropertyOwner(owner_name="Ramesh Patel", phone_number="9876543210")]
        assert owner_matches(owners, "ramesh")
        assert owner_matches(owners, "PATEL")

    def test_phone_substring(self):
        owners = [PropertyOwner(owner_name="Ramesh Patel", phone_number="9876543210")]
        assert owner_matches(owners, "98765")
        assert not owner_matches(owners, "11111")

    def test_no_owners(self):
        assert not owner_matches([], "anyone")


class TestPropertySearchResolver:
    """Primary query and fallback behaviour"""

    @pytest.mark.asyncio
    async def test_owner_name_found_through_fallback(self, db, broker, portfolio):
        _, other = await portfolio()
        assert await search_ids(db, broker, q="Ramesh") == [other]

    @pytest.mark.asyncio
    async def test_column_match_skips_fallback(self, db, broker, portfolio):
        kalawad, _ = await portfolio()
        assert await search_ids(db, broker, q="kalawad") == [kalawad]

    @pytest.mark.asyncio
    async def test_column_match_hides_owner_matches(self, db, broker, make_property, portfolio):
        """A term matching one listing's columns does not also return owner matches"""
        kalawad, _ = await portfolio()
        assert await search_ids(db, broker, q="Kalawad") == [kalawad]
        third = await make_property(broker, area="Ramesh Nagar")
        assert await search_ids(db, broker, q="Ramesh") == [third]

    @pytest.mark.asyncio
    async def test_no_match_anywhere(self, db, broker, portfolio):
        await portfolio()
        assert await search_ids(db, broker, q="Ahmedabad") == []

    @pytest.mark.asyncio
    async def test_blank_query_returns_everything(self, db, broker, portfolio):
        kalawad, other = await portfolio()
        assert await search_ids(db, broker, q="  ") == [other, kalawad]

    @pytest.mark.asyncio
    async def test_exact_filters(self, db, broker, portfolio):
        kalawad, other = await portfolio()
        assert await search_ids(db, broker, property_type=PropertyType.PLOT) == [kalawad]
        assert await search_ids(db, broker, status=PropertyStatus.RENTED) == [other]
        assert await search_ids(db, broker, bhk=2) == [other]
        assert await search_ids(db, broker, furnished_status=FurnishedStatus.FURNISHED) == [other]

    @pytest.mark.asyncio
    async def test_price_range(self, db, broker, portfolio):
        kalawad, other = await portfolio()
        assert await search_ids(db, broker, min_price=5800000) == [kalawad]
        assert await search_ids(db, broker, max_price=5800000) == [other]
        assert await search_ids(db, broker, min_price=5000000, max_price=7000000) == [other, kalawad]

    @pytest.mark.asyncio
    async def test_zero_bounds_are_ignored(self, db, broker, make_property, portfolio):
        kalawad, other = await portfolio()
        unpriced = await make_property(broker, area="Unpriced")

        assert await search_ids(db, broker, min_price=0) == [unpriced, other, kalawad]
        assert await search_ids(db, broker, max_price=0) == [unpriced, other, kalawad]
        assert await search_ids(db, broker, bhk=0) == [unpriced, other, kalawad]

    @pytest.mark.asyncio
    async def test_partial_filters(self, db, broker, portfolio):
        kalawad, other = await portfolio()
        assert await search_ids(db, broker, area="kala") == [kalawad]
        assert await search_ids(db, broker, survey_no="234") == [other]
        assert await search_ids(db, broker, city="raj") == [other, kalawad]

    @pytest.mark.asyncio
    async def test_like_wildcards_match_literally(self, db, broker, portfolio):
        await portfolio()
        assert await search_ids(db, broker, area="%") == []

    @pytest.mark.asyncio
    async def test_owner_name_filter(self, db, broker, portfolio):
        kalawad, other = await portfolio()
        assert await search_ids(db, broker, owner_name="ramesh") == [other]
        assert await search_ids(db, broker, owner_name="9000000001") == [kalawad]

    @pytest.mark.asyncio
    async def test_owner_filter_disables_fallback(self, db, broker, portfolio):
        await portfolio()
        assert await search_ids(db, broker, q="Ramesh", owner_name="Ramesh") == []

    @pytest.mark.asyncio
    async def test_fallback_respects_broker(self, db, broker, other_broker, make_property, portfolio):
        await portfolio()
        await make_property(other_broker, owners=[{"owner_name": "Ramesh Bhatt"}])
        results = await PropertySearchResolver(db, other_broker.id).search(SearchFilters(q="Patel"))
        assert results == []

    @pytest.mark.asyncio
    async def test_results_are_newest_first(self, db, broker, make_property):
        ids = [await make_property(broker, area=f"Area {n}") for n in range(3)]
        assert await search_ids(db, broker) == list(reversed(ids))
