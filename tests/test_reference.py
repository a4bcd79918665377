import json

import pytest

from offline_orders.domain.mappings.repository import MAPPING_KIND, MappingSeedTarget
from offline_orders.domain.reference.repository import (
    REFERENCE_KINDS,
    DatabaseReferenceStore,
    FileReferenceStore,
    build_reference_store,
)
from offline_orders.domain.reference.service import ReferenceService
from offline_orders.exceptions import EmptyPayload, InvalidFilter, NotFound
from offline_orders.models import ManagerStoreMapping
from offline_orders.services.seeding import Seeder, load_snapshot, seed_all

STORES = [{"code": "S001", "name": "강남점"}, {"code": "S002", "name": "홍대점"}]


@pytest.fixture(params=["db", "file"])
def store(request, session_factory, tmp_path):
    return build_reference_store(request.param, session_factory, str(tmp_path / "data"))


class TestReferenceService:
    def test_replace_then_read_preserves_order(self, store):
        service = ReferenceService(store)
        assert service.replace_all("ecount-stores", STORES) == 2
        assert service.get_all("ecount-stores") == STORES

        service.replace_all("ecount-stores", list(reversed(STORES)))
        assert service.get_all("ecount-stores") == list(reversed(STORES))

    def test_kinds_are_independent(self, store):
        service = ReferenceService(store)
        service.replace_all("ecount-stores", STORES)
        service.replace_all("item-codes", [{"code": "P10001"}])
        assert service.get_all("ecount-stores") == STORES
        assert service.get_all("static-managers") == []

    def test_empty_replace_is_rejected(self, store):
        service = ReferenceService(store)
        service.replace_all("ecount-stores", STORES)
        with pytest.raises(EmptyPayload):
            service.replace_all("ecount-stores", [])
        assert service.get_all("ecount-stores") == STORES

    def test_forced_empty_replace_clears(self, store):
        service = ReferenceService(store)
        service.replace_all("ecount-stores", STORES)
        assert service.replace_all("ecount-stores", [], force=True) == 0
        assert service.get_all("ecount-stores") == []

    def test_non_object_entries(self, store):
        with pytest.raises(InvalidFilter):
            ReferenceService(store).replace_all("ecount-stores", ["강남점"])

    def test_unknown_kind(self, store):
        with pytest.raises(NotFound):
            ReferenceService(store).get_all("coupons")


def test_file_store_layout(tmp_path):
    store = FileReferenceStore(str(tmp_path))
    store.replace_all("ecount-warehouses", [{"code": "Y000", "name": "본사 물류창고"}])

    path = tmp_path / "ecount-warehouses.json"
    assert json.loads(path.read_text(encoding="utf-8")) == [{"code": "Y000", "name": "본사 물류창고"}]
    assert list(tmp_path.glob("*.tmp")) == []


def test_database_store_selected_by_default(session_factory, tmp_path):
    assert isinstance(build_reference_store("db", session_factory, str(tmp_path)), DatabaseReferenceStore)


class TestSeeding:
    def test_bundled_snapshots_are_lists(self):
        for kind in REFERENCE_KINDS + (MAPPING_KIND,):
            assert load_snapshot(kind)

    def test_seed_fills_empty_collection(self, store):
        result = Seeder(store).seed("ecount-stores", STORES)
        assert result == {"seeded": True, "count": 2}
        assert store.get_all("ecount-stores") == STORES

    def test_seed_is_idempotent(self, store):
        store.replace_all("ecount-stores", [{"code": "S999", "name": "edited"}])

        result = Seeder(store).seed("ecount-stores", STORES)

        assert result == {"seeded": False, "count": 1}
        assert store.get_all("ecount-stores") == [{"code": "S999", "name": "edited"}]

    def test_reseed_replaces(self, store):
        store.replace_all("ecount-stores", [{"code": "S999", "name": "edited"}])
        assert Seeder(store).reseed("ecount-stores", STORES) == {"seeded": True, "count": 2}
        assert store.get_all("ecount-stores") == STORES

    def test_seed_all_skips_missing_snapshots(self, store, tmp_path):
        seed_dir = tmp_path / "seeds"
        seed_dir.mkdir()
        (seed_dir / "ecount-stores.json").write_text(json.dumps(STORES), encoding="utf-8")
        (seed_dir / "item-codes.json").write_text(json.dumps({"not": "a list"}), encoding="utf-8")

        results = seed_all({kind: store for kind in REFERENCE_KINDS}, seed_dir=seed_dir)

        assert results == {"ecount-stores": {"seeded": True, "count": 2}}

    def test_mapping_seed_applies_defaults(self, session_factory):
        target = MappingSeedTarget(session_factory)
        Seeder(target).seed(MAPPING_KIND, load_snapshot(MAPPING_KIND))

        db = session_factory()
        mapping = db.query(ManagerStoreMapping).filter(ManagerStoreMapping.manager_code == "M003").one()
        assert mapping.warehouse_code == "Y000"
        assert mapping.trade_type == "VAT-applicable"
        db.close()

        assert Seeder(target).seed(MAPPING_KIND, [])["seeded"] is False
