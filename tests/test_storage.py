"""Unit tests for storage adapters."""

import json

from fitness_ledger.infrastructure.storage import InMemoryStorage, JsonFileStorage


def test_file_storage_round_trip(tmp_path) -> None:
    """Test that saved documents load back."""
    storage = JsonFileStorage(tmp_path / "data")
    document = {"weights": {"2024-01-01": 80.5}}

    if not storage.save("slot", document):
        raise AssertionError("Expected save to succeed")

    if storage.load("slot", None) != document:
        raise AssertionError("Loaded document differs from saved one")

    if not (tmp_path / "data" / "slot.json").exists():
        raise AssertionError("Expected slot file to be created")

    leftovers = list((tmp_path / "data").glob("*.tmp"))
    if leftovers:
        raise AssertionError(f"Temporary files left behind: {leftovers}")


def test_file_storage_missing_slot_returns_fallback(tmp_path) -> None:
    """Test that a missing slot yields the fallback unchanged."""
    storage = JsonFileStorage(tmp_path)
    fallback = {"default": True}

    if storage.load("absent", fallback) is not fallback:
        raise AssertionError("Expected the fallback object itself")


def test_file_storage_corrupt_slot_returns_fallback(tmp_path) -> None:
    """Test that unparsable data yields the fallback."""
    (tmp_path / "slot.json").write_text("{broken", encoding="utf-8")
    storage = JsonFileStorage(tmp_path)

    if storage.load("slot", "fallback") != "fallback":
        raise AssertionError("Expected fallback for corrupt data")


def test_file_storage_write_failure_is_swallowed(tmp_path) -> None:
    """Test that write failures return False instead of raising."""
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    storage = JsonFileStorage(blocker)

    if storage.save("slot", {"a": 1}):
        raise AssertionError("Expected save to report failure")


def test_file_storage_overwrites_previous_blob(tmp_path) -> None:
    """Test last-write-wins semantics."""
    storage = JsonFileStorage(tmp_path)

    storage.save("slot", {"version": 1})
    storage.save("slot", {"version": 2})

    stored = json.loads((tmp_path / "slot.json").read_text(encoding="utf-8"))
    if stored != {"version": 2}:
        raise AssertionError(f"Expected latest write, got {stored}")


def test_in_memory_storage_failures() -> None:
    """Test simulated read and write failures."""
    storage = InMemoryStorage(fail_writes=True)

    if storage.save("slot", {"a": 1}):
        raise AssertionError("Expected failed write")
    if "slot" in storage.slots:
        raise AssertionError("Failed write should not store data")

    storage.fail_writes = False
    storage.save("slot", {"a": 1})
    storage.fail_reads = True

    if storage.load("slot", None) is not None:
        raise AssertionError("Expected fallback on failed read")


def test_unserializable_document_is_swallowed() -> None:
    """Test that values json cannot encode fail softly."""
    storage = InMemoryStorage()

    if storage.save("slot", {"bad": object()}):
        raise AssertionError("Expected save to report failure")
