import json
import math

import pytest

from core.errors import ValidationRejected
from core.registry import DEFAULT_STORAGE_KEY, Registry, parse_amount
from core.schema_models import RejectionReason
from core.storage import FileStorage, MemoryStorage

from conftest import FIXED_NOW


def _add_three(registry):
    registry.add("Ali Baba", "1111111111111111", "Jl. Sudirman 10", "1000")
    registry.add("Siti Aminah", "2222222222222222", "Gang Mawar, Bandung", "2500000")
    registry.add("Budi Santoso", "3201012345678901", "Jl. Merdeka No. 1", "5000000")


def test_add_inserts_newest_first(registry, budi):
    second = registry.add("Siti Aminah", "2222222222222222", "", "100")

    records = registry.search("")
    assert records[0] == second
    assert records[1] == budi
    assert len(registry) == 2


def test_add_returns_canonical_record(registry):
    record = registry.add("  Budi Santoso ", "3201012345678901 ", "  Jl. Merdeka No. 1  ", "5000000")

    assert record.name == "Budi Santoso"
    assert record.national_id == "3201012345678901"
    assert record.address == "Jl. Merdeka No. 1"
    assert record.amount == 5000000
    assert record.created_at == "5/1/2024, 09.07.03"


def test_ids_are_unique_and_increasing(registry):
    _add_three(registry)
    ids = [record.id for record in registry.list()]
    # Más reciente primero: ids estrictamente decrecientes
    assert ids == sorted(ids, reverse=True)
    assert len(set(ids)) == 3


def test_add_persists_before_returning(storage, registry, budi):
    stored = json.loads(storage.get_item(DEFAULT_STORAGE_KEY))
    assert stored == [{
        "id": budi.id,
        "name": "Budi Santoso",
        "nationalId": "3201012345678901",
        "address": "Jl. Merdeka No. 1",
        "amount": 5000000,
        "createdAt": "5/1/2024, 09.07.03",
    }]


def test_records_are_immutable(budi):
    with pytest.raises(Exception):
        budi.name = "Changed"


def test_list_returns_a_copy(registry, budi):
    records = registry.list()
    records.clear()
    assert len(registry) == 1


def test_delete_removes_matching_record(storage, registry):
    _add_three(registry)
    target = registry.list()[1]

    assert registry.delete(target.id) is True
    assert target not in registry.list()
    assert len(json.loads(storage.get_item(DEFAULT_STORAGE_KEY))) == 2


def test_delete_unknown_id_is_noop(registry, budi):
    assert registry.delete(budi.id + 999) is False
    assert registry.list() == [budi]


def test_delete_all_empties_registry_and_storage(storage, registry):
    _add_three(registry)
    registry.delete_all()

    assert registry.search("") == []
    assert json.loads(storage.get_item(DEFAULT_STORAGE_KEY)) == []
    assert Registry(storage).list() == []


def test_search_blank_query_returns_everything(registry):
    _add_three(registry)
    assert registry.search("") == registry.list()
    assert registry.search("   ") == registry.list()


def test_search_name_is_case_insensitive(registry):
    _add_three(registry)
    results = registry.search("ali")
    assert [r.name for r in results] == ["Ali Baba"]


def test_search_address_is_case_insensitive(registry):
    _add_three(registry)
    results = registry.search("BANDUNG")
    assert [r.name for r in results] == ["Siti Aminah"]


def test_search_full_national_id_returns_record(registry):
    _add_three(registry)
    results = registry.search("3201012345678901")
    assert [r.name for r in results] == ["Budi Santoso"]


def test_search_national_id_uses_raw_query(registry):
    _add_three(registry)
    # Con espacios alrededor no coincide con el NIK, ni con nombre/dirección
    assert registry.search(" 3201012345678901 ") == []
    assert [r.name for r in registry.search("2222")] == ["Siti Aminah"]


def test_search_keeps_registry_order(registry):
    _add_three(registry)
    results = registry.search("jl.")
    assert [r.name for r in results] == ["Budi Santoso", "Ali Baba"]


def test_round_trip_reload_is_identical(storage, registry):
    _add_three(registry)
    reloaded = Registry(storage)
    assert reloaded.list() == registry.list()


def test_round_trip_with_file_storage(tmp_path):
    storage = FileStorage(tmp_path / "data")
    registry = Registry(storage, clock=lambda: FIXED_NOW)
    _add_three(registry)

    assert (tmp_path / "data" / f"{DEFAULT_STORAGE_KEY}.json").exists()
    assert Registry(FileStorage(tmp_path / "data")).list() == registry.list()


@pytest.mark.parametrize("payload", [
    "{not json",
    '{"id": 1}',
    '[{"id": "abc"}]',
    '[{"name": "Budi"}]',
])
def test_corrupt_storage_loads_empty(payload):
    storage = MemoryStorage({DEFAULT_STORAGE_KEY: payload})
    assert Registry(storage).list() == []


def test_missing_storage_loads_empty():
    assert len(Registry(MemoryStorage())) == 0


def test_duplicates_in_storage_are_not_deduplicated():
    item = {
        "id": 1, "name": "Budi", "nationalId": "3201012345678901",
        "address": "", "amount": 1, "createdAt": "1/1/2024, 00.00.00",
    }
    twin = dict(item, id=2)
    storage = MemoryStorage({DEFAULT_STORAGE_KEY: json.dumps([item, twin])})
    assert len(Registry(storage)) == 2


def test_storage_errors_propagate(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    registry = Registry(FileStorage(blocker / "data"))

    with pytest.raises(OSError):
        registry.add("Budi Santoso", "3201012345678901", "", "1")


@pytest.mark.parametrize("raw, expected", [
    ("5000000", 5000000),
    ("5000000.75", 5000000),
    ("  42abc", 42),
    ("-15", -15),
    ("+7", 7),
    ("007", 7),
    (1234, 1234),
])
def test_parse_amount_reads_leading_digits(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", ".5", "Rp 100", None])
def test_parse_amount_without_digits_is_nan(raw):
    assert math.isnan(parse_amount(raw))


def test_nan_amount_is_accepted_and_persisted_as_null(storage, registry):
    record = registry.add("Budi Santoso", "3201012345678901", "", "tidak ada")
    assert math.isnan(record.amount)

    stored = json.loads(storage.get_item(DEFAULT_STORAGE_KEY))
    assert stored[0]["amount"] is None
    assert Registry(storage).list()[0].amount is None


def test_registries_over_same_storage_reload_changes(storage, registry):
    other = Registry(storage, clock=lambda: FIXED_NOW)
    registry.add("Ali Baba", "1111111111111111", "", "1")
    other.add("Budi Santoso", "3201012345678901", "", "2")

    assert [r.name for r in registry.list()] == ["Budi Santoso", "Ali Baba"]
    assert [item["name"] for item in json.loads(storage.get_item(DEFAULT_STORAGE_KEY))] == [
        "Budi Santoso", "Ali Baba"]


def test_add_rejects_national_id_persisted_by_another_instance(storage, registry):
    other = Registry(storage)
    other.add("Ali Baba", "1111111111111111", "", "1")

    with pytest.raises(ValidationRejected) as excinfo:
        registry.add("Ali Clone", " 1111111111111111", "", "2")

    assert excinfo.value.reason == RejectionReason.DUPLICATE_NATIONAL_ID
    assert len(Registry(storage)) == 1


def test_failed_write_leaves_records_unchanged(storage, registry, budi, monkeypatch):
    def broken(key, value):
        raise OSError("disk full")

    monkeypatch.setattr(storage, "set_item", broken)
    with pytest.raises(OSError):
        registry.add("Siti Aminah", "2222222222222222", "", "1")

    assert registry.list() == [budi]


def test_get_finds_record_by_id(registry, budi):
    assert registry.get(budi.id) == budi
    assert registry.get(budi.id + 1) is None
