"""
Tests for the source state file.
"""

import json
from pathlib import Path

from podforge.core.models.config import SourceState
from podforge.core.persistence.state_file import default_state_path, load_state, save_state


class TestStateFile:
    def test_default_path(self, tmp_path: Path):
        assert default_state_path(tmp_path) == tmp_path / "sources.json"

    def test_missing_file_gives_fresh_state(self, tmp_path: Path):
        assert load_state(tmp_path / "sources.json").unmounted == []

    def test_save_and_load(self, tmp_path: Path):
        path = tmp_path / "out" / "sources.json"
        state = SourceState()
        state.set_unmounted("rails_hello", True)
        state.set_unmounted("coffee-rails", True)
        save_state(state, path)

        data = json.loads(path.read_text())
        assert data["unmounted"] == ["coffee-rails", "rails_hello"]
        assert load_state(path).unmounted == ["coffee-rails", "rails_hello"]

    def test_no_temp_files_left(self, tmp_path: Path):
        save_state(SourceState(), tmp_path / "sources.json")
        assert [p.name for p in tmp_path.iterdir()] == ["sources.json"]

    def test_corrupt_file_gives_fresh_state(self, tmp_path: Path):
        path = tmp_path / "sources.json"
        path.write_text("{not json")
        assert load_state(path).unmounted == []

    def test_set_unmounted_is_idempotent(self):
        state = SourceState()
        state.set_unmounted("a", True)
        state.set_unmounted("a", True)
        assert state.unmounted == ["a"]
        state.set_unmounted("a", False)
        state.set_unmounted("a", False)
        assert state.unmounted == []
