import pytest

from errors import SeedNotFoundError, SeedWriteError
from seed_store import SeedStore


def test_save_creates_parent_dirs(tmp_path, hex_seed):
    store = SeedStore(tmp_path / "nested" / "dir" / "seed.txt")
    store.save(hex_seed)
    assert store.exists()
    assert store.load() == hex_seed


def test_load_is_not_cached(tmp_path, hex_seed):
    store = SeedStore(tmp_path / "seed.txt")
    store.save(hex_seed)
    assert store.load() == hex_seed
    store.save("0" * 64)
    assert store.load() == "0" * 64


def test_load_normalizes_trailing_newline(tmp_path, hex_seed):
    path = tmp_path / "seed.txt"
    path.write_text(hex_seed.upper() + "\n")
    assert SeedStore(path).load() == hex_seed


def test_load_missing(tmp_path):
    with pytest.raises(SeedNotFoundError):
        SeedStore(tmp_path / "seed.txt").load()


def test_load_empty(tmp_path):
    path = tmp_path / "seed.txt"
    path.write_text("\n")
    with pytest.raises(SeedNotFoundError):
        SeedStore(path).load()


def test_load_corrupt(tmp_path):
    path = tmp_path / "seed.txt"
    path.write_text("deadbeef")
    with pytest.raises(SeedNotFoundError):
        SeedStore(path).load()


def test_load_undecodable_bytes(tmp_path):
    path = tmp_path / "seed.txt"
    path.write_bytes(b"\xff\xfe" + b"a" * 62)
    with pytest.raises(SeedNotFoundError):
        SeedStore(path).load()


def test_load_path_is_directory(tmp_path):
    with pytest.raises(SeedNotFoundError):
        SeedStore(tmp_path).load()


def test_save_into_unwritable_location(tmp_path, hex_seed):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(SeedWriteError):
        SeedStore(blocker / "seed.txt").save(hex_seed)
