"""Key/value stores."""

import pytest

from paper_engine.services.storage import JsonFileStore, MemoryStore


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(tmp_path / "papers")


def test_set_get_remove(any_store):
    assert any_store.get_item("paper_a") is None
    assert any_store.set_item("paper_a", '{"id": "a"}')
    assert any_store.get_item("paper_a") == '{"id": "a"}'

    assert any_store.set_item("paper_a", "second")
    assert any_store.get_item("paper_a") == "second"

    assert any_store.remove_item("paper_a")
    assert any_store.get_item("paper_a") is None
    assert any_store.remove_item("paper_a")


def test_keys(any_store):
    any_store.set_item("paper_b", "1")
    any_store.set_item("paper_a", "2")
    assert sorted(any_store.keys()) == ["paper_a", "paper_b"]


def test_memory_store_initial_data():
    store = MemoryStore({"k": "v"})
    assert store.get_item("k") == "v"
    assert len(store) == 1


def test_file_store_layout(tmp_path):
    store = JsonFileStore(tmp_path)
    store.set_item("paper_x1", "ünïcode")

    path = tmp_path / "paper_x1.json"
    assert path.read_text(encoding="utf-8") == "ünïcode"
    assert store.base_path == tmp_path


def test_file_store_creates_folder(tmp_path):
    base = tmp_path / "nested" / "papers"
    JsonFileStore(base)
    assert base.is_dir()


def test_file_store_ignores_other_files(tmp_path):
    store = JsonFileStore(tmp_path)
    (tmp_path / "notes.txt").write_text("x")
    (tmp_path / "folder.json").mkdir()
    store.set_item("paper_a", "1")
    assert store.keys() == ["paper_a"]


@pytest.mark.parametrize("key", ["../escape", "a/b", "", "..", "sp ace"])
def test_file_store_rejects_unsafe_keys(tmp_path, key):
    store = JsonFileStore(tmp_path)
    assert not store.set_item(key, "x")
    assert store.get_item(key) is None
    assert not store.remove_item(key)
    assert store.keys() == []
