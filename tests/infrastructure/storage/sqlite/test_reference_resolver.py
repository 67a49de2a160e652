"""Tests for name-to-id resolution."""

import pytest

from stockroom.core.entities.reference import ReferenceKind
from stockroom.infrastructure.storage.sqlite import SQLiteReferenceResolver


@pytest.fixture
def resolver(pool) -> SQLiteReferenceResolver:
    return SQLiteReferenceResolver(pool)


class TestSQLiteReferenceResolver:
    async def test_resolves_each_kind(self, resolver, seeded):
        assert await resolver.resolve(ReferenceKind.LOCATION, "Main Warehouse") == seeded["location_id"]
        assert await resolver.resolve(ReferenceKind.SUPPLIER, "Acme Supply") == seeded["supplier_id"]
        assert await resolver.resolve(ReferenceKind.CUSTOMER, "Bob Builder") == seeded["customer_id"]
        assert await resolver.resolve(ReferenceKind.CATEGORY, "Electrical") == seeded["category_id"]

    async def test_unknown_label_is_none(self, resolver, seeded):
        assert await resolver.resolve(ReferenceKind.SUPPLIER, "Nobody Ltd") is None

    async def test_match_is_case_sensitive(self, resolver, seeded):
        assert await resolver.resolve(ReferenceKind.LOCATION, "main warehouse") is None

    @pytest.mark.parametrize("label", [None, "", "   "])
    async def test_blank_label_is_none(self, resolver, seeded, label):
        assert await resolver.resolve(ReferenceKind.LOCATION, label) is None

    async def test_resolve_many(self, resolver, seeded):
        result = await resolver.resolve_many({
            ReferenceKind.LOCATION: "Main Warehouse",
            ReferenceKind.CUSTOMER: "Unknown",
        })
        assert result == {
            ReferenceKind.LOCATION: seeded["location_id"],
            ReferenceKind.CUSTOMER: None,
        }
