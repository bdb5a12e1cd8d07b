import pytest

from washlab.database.database import Database
from washlab.errors import PersistenceError


def test_missing_key_reads_empty(db):
    assert db.read("washlab_orders") == []


def test_write_then_read(db):
    db.write("washlab_orders", [{"id": "order-1"}])
    assert db.read("washlab_orders") == [{"id": "order-1"}]


def test_append(db):
    db.append("washlab_attendance", {"n": 1})
    db.append("washlab_attendance", {"n": 2})
    assert db.read("washlab_attendance") == [{"n": 1}, {"n": 2}]


def test_corrupt_document_reads_empty(db):
    (db.data_dir / "washlab_orders.json").write_text("{not json", encoding="utf-8")
    assert db.read("washlab_orders") == []


def test_non_list_document_reads_empty(db):
    (db.data_dir / "washlab_orders.json").write_text('{"id": 1}', encoding="utf-8")
    assert db.read("washlab_orders") == []


def test_unserializable_record_raises_and_keeps_old_data(db):
    db.write("washlab_orders", [{"id": "order-1"}])

    with pytest.raises(PersistenceError):
        db.write("washlab_orders", [object()])

    assert db.read("washlab_orders") == [{"id": "order-1"}]
    assert [p.name for p in db.data_dir.iterdir()] == ["washlab_orders.json"]


def test_unwritable_location_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    database = Database(blocker)

    with pytest.raises(PersistenceError) as excinfo:
        database.write("washlab_orders", [])
    assert excinfo.value.key == "washlab_orders"
