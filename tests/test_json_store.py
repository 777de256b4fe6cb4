import json
import threading

import pytest

from stockledger.domain import Movement, Product
from stockledger.errors import StorageError
from stockledger.repositories import JsonMovementRepository, JsonProductRepository
from stockledger.services import MovementLedger


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_missing_file_reads_empty_and_is_created_wrapped(tmp_path):
    path = tmp_path / "nested" / "productos.json"
    repo = JsonProductRepository.at(path)
    assert repo.list() == []

    repo.put(Product(sku="A"))
    assert _read(path) == {
        "productos": [{"sku": "A", "nombre": "", "categoria": "", "stock": 0, "precio": 0}]
    }


def test_bare_list_shape_is_preserved(tmp_path):
    path = tmp_path / "productos.json"
    _write(path, [{"sku": "A", "nombre": "Uno", "categoria": "X", "stock": 1, "precio": 2}])

    JsonProductRepository.at(path).put(Product(sku="B"))
    stored = _read(path)
    assert isinstance(stored, list)
    assert [record["sku"] for record in stored] == ["A", "B"]


def test_wrapped_shape_and_extra_keys_are_preserved(tmp_path):
    path = tmp_path / "movements.json"
    _write(path, {"version": 2, "movements": []})

    repo = JsonMovementRepository.at(path)
    repo.put(Movement(id="1", date="d", product="p", sku="A", movement="Stock In", quantity=1))
    stored = _read(path)
    assert stored["version"] == 2
    assert [record["id"] for record in stored["movements"]] == ["1"]


def test_untouched_records_keep_unknown_fields(tmp_path):
    path = tmp_path / "productos.json"
    _write(path, {"productos": [{"sku": "A", "nombre": "Uno", "color": "rojo"}]})

    JsonProductRepository.at(path).put(Product(sku="B"))
    assert _read(path)["productos"][0]["color"] == "rojo"


def test_legacy_records_are_read_with_defaults(tmp_path):
    path = tmp_path / "movements.json"
    _write(path, [{"id": 7, "sku": "A", "movement": "Stock Out", "quantity": "3"}])

    [movement] = JsonMovementRepository.at(path).list()
    assert movement.id == "7"
    assert movement.quantity == 3
    assert movement.user == "System"
    assert JsonMovementRepository.at(path).get("7") == movement


def test_remove_reports_whether_something_matched(tmp_path):
    repo = JsonProductRepository.at(tmp_path / "productos.json")
    repo.put(Product(sku="A"))
    assert repo.remove("A") is True
    assert repo.remove("A") is False


@pytest.mark.parametrize("content", ["{not json", "42", '{"productos": {"sku": "A"}}', '["A"]'])
def test_corrupt_files_raise_storage_error(tmp_path, content):
    path = tmp_path / "productos.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageError):
        JsonProductRepository.at(path).list()


def test_stores_for_the_same_path_share_a_lock(tmp_path):
    first = JsonMovementRepository.at(tmp_path / "movements.json")
    second = JsonMovementRepository.at(tmp_path / "movements.json")
    assert first.write_lock() is second.write_lock()


def test_concurrent_adds_do_not_lose_updates(tmp_path):
    path = tmp_path / "movements.json"
    draft = {"product": "p", "sku": "A", "movement": "Stock In", "quantity": 1}

    def worker():
        ledger = MovementLedger(JsonMovementRepository.at(path))
        for _ in range(10):
            ledger.add(draft)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(JsonMovementRepository.at(path).list()) == 40
