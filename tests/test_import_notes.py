"""Tests for the bulk note import CLI."""

from pathlib import Path

import pytest

from cortex.vector_dbs.local_db import LocalVectorDB
from scripts import import_notes
from tests.fakes import FakeClassifier, FakeEmbedder


def test_read_note_file_uses_markdown_header_as_title(tmp_path: Path) -> None:
    note_file = tmp_path / "pricing.md"
    note_file.write_text("# Pricing thoughts\n\nUsage-based pricing fits.\n")

    assert import_notes.read_note_file(note_file) == ("Pricing thoughts", "Usage-based pricing fits.")


def test_read_note_file_falls_back_to_file_stem(tmp_path: Path) -> None:
    note_file = tmp_path / "groceries.txt"
    note_file.write_text("Eggs and milk")

    assert import_notes.read_note_file(note_file) == ("groceries", "Eggs and milk")


def test_main_saves_every_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    notes_dir = tmp_path / "notes"
    (notes_dir / "nested").mkdir(parents=True)
    (notes_dir / "one.md").write_text("# One\nFirst idea")
    (notes_dir / "nested" / "two.txt").write_text("Second idea")
    (notes_dir / "empty.md").write_text("   ")
    db_path = tmp_path / "cortex.json"

    monkeypatch.setattr(import_notes, "build_embedder", lambda config: FakeEmbedder())
    monkeypatch.setattr(import_notes, "build_classifier", lambda config: FakeClassifier())

    import_notes.main(in_folder=str(notes_dir), db_path=str(db_path), tags=["imported"])

    notes = LocalVectorDB(db_path).get_recent_notes(10)
    assert sorted(note.title for note in notes) == ["One", "two"]
    assert all(note.source == "auto" and note.tags == ["imported"] for note in notes)
