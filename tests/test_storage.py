import pytest

from music_factory.services.storage import DataStore, PathOutsideDataDirError, extract_slug


class TestDataStore:
    def test_round_trip_under_root(self, tmp_path):
        store = DataStore(tmp_path / "data")
        full = store.write_text("outputs/song/title.txt", "夜")
        assert full == tmp_path / "data" / "outputs" / "song" / "title.txt"
        assert store.read_text("outputs/song/title.txt") == "夜"
        assert store.exists("outputs/song/title.txt")

    def test_absolute_path_inside_root(self, tmp_path):
        store = DataStore(tmp_path)
        store.write_text("notes/a.md", "note")
        assert store.read_text(tmp_path / "notes" / "a.md") == "note"

    @pytest.mark.parametrize("path", ["/etc/hostname", "../outside/suno_style.txt", "outputs/../../x"])
    def test_paths_outside_root_rejected(self, tmp_path, path):
        """Absolute paths and parent references may not leave the data directory."""
        store = DataStore(tmp_path / "data")
        with pytest.raises(PathOutsideDataDirError):
            store.resolve(path)

    def test_outside_file_never_read(self, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.txt").write_text("secret", encoding="utf-8")
        store = DataStore(tmp_path / "data")
        with pytest.raises(ValueError):
            store.read_text(outside / "secret.txt")
        with pytest.raises(ValueError):
            store.exists("../outside/secret.txt")

    def test_write_outside_root_rejected(self, tmp_path):
        store = DataStore(tmp_path / "data")
        with pytest.raises(PathOutsideDataDirError):
            store.write_text("../escaped.txt", "x")
        assert not (tmp_path / "escaped.txt").exists()

    def test_root_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MUSIC_FACTORY_DATA_PATH", raising=False)
        monkeypatch.setenv("DATA_PATH", str(tmp_path))
        assert DataStore().root == tmp_path
        monkeypatch.setenv("MUSIC_FACTORY_DATA_PATH", str(tmp_path / "mf"))
        assert DataStore().root == tmp_path / "mf"


def test_extract_slug():
    assert extract_slug("analysis/yorushika_tadakiminihare.yaml") == "yorushika_tadakiminihare"
