import pytest
from fastapi.testclient import TestClient

from conftest import analysis_data
from music_factory.api.routes import create_app
from music_factory.services.storage import DataStore


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_core_types(self, client):
        names = [c["name"] for c in client.get("/api/core-types").json()["core_types"]]
        assert names[0] == "yorushika"
        assert len(names) == 6


class TestAnalysisEndpoints:
    def test_parse(self, client, analysis_markdown):
        response = client.post("/api/analysis/parse", json={"markdown": analysis_markdown})
        assert response.status_code == 200
        body = response.json()
        assert body["parsed"]["title"] == "夜に駆ける"
        assert body["validation"] == {"valid": True, "errors": []}

    def test_save(self, client, store, analysis_markdown):
        response = client.post(
            "/api/analysis", json={"slug": "yoasobi_yorunikakeru", "markdown": analysis_markdown}
        )
        assert response.status_code == 200
        assert response.json()["parsed_summary"]["sections_count"] == 11
        assert store.exists("analysis/yoasobi_yorunikakeru.md")

    def test_save_bad_slug(self, client, analysis_markdown):
        response = client.post("/api/analysis", json={"slug": "Bad Slug", "markdown": analysis_markdown})
        assert response.status_code == 400

    def test_analyze_reference(self, client, store):
        response = client.post(
            "/api/analyze-reference",
            json={"title": "Idol", "artist": "YOASOBI", "core_type": "yoasobi"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["analysis_path"] == "analysis/yoasobi_idol.yaml"
        assert store.exists(body["analysis_path"])

    def test_analyze_reference_unknown_core_type(self, client):
        response = client.post(
            "/api/analyze-reference",
            json={"title": "Idol", "artist": "YOASOBI", "core_type": "nope"},
        )
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Unknown core_type: nope")

    def test_analyze_reference_too_many_genres(self, client):
        response = client.post(
            "/api/analyze-reference",
            json={"title": "x", "artist": "y", "core_type": "illit", "genre_tags": ["a", "b", "c", "d", "e"]},
        )
        assert response.status_code == 422


class TestPackEndpoints:
    def test_generate_and_validate_dir(self, client, store):
        store.write_yaml("analysis/song.yaml", analysis_data())
        response = client.post("/api/suno-pack", json={"analysis_path": "analysis/song.yaml"})
        assert response.status_code == 200
        body = response.json()
        assert body["validation"]["valid"]
        assert body["files"]["suno_lyrics"] == "outputs/song/suno_lyrics.txt"

        response = client.post("/api/suno-pack/validate-dir", json={"output_dir": body["output_dir"]})
        assert response.json()["valid"]

    def test_generate_missing_analysis(self, client):
        response = client.post("/api/suno-pack", json={"analysis_path": "analysis/none.yaml"})
        assert response.status_code == 404

    def test_paths_outside_data_dir_rejected(self, tmp_path):
        """Requests cannot read files outside the data directory."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "suno_style.txt").write_text("Genre:\nPop", encoding="utf-8")
        (outside / "suno_lyrics.txt").write_text("[Verse 1]", encoding="utf-8")
        client = TestClient(create_app(DataStore(tmp_path / "data")))

        response = client.post("/api/suno-pack/validate-dir", json={"output_dir": str(outside)})
        assert response.status_code == 400
        response = client.post("/api/suno-pack/validate-dir", json={"output_dir": "../outside"})
        assert response.status_code == 400
        response = client.post("/api/suno-pack", json={"analysis_path": "/etc/hostname"})
        assert response.status_code == 400

    def test_generate_invalid_analysis(self, client, store):
        store.write_text("analysis/bad.yaml", "- not a mapping\n")
        response = client.post("/api/suno-pack", json={"analysis_path": "analysis/bad.yaml"})
        assert response.status_code == 400

    def test_render(self, client):
        response = client.post("/api/suno-pack/render", json={"analysis": analysis_data()})
        assert response.status_code == 200
        body = response.json()
        assert body["suno_style"].startswith("Genre:")
        assert body["checks"]["within_1000_chars"]

    def test_render_rejects_bad_analysis(self, client):
        data = analysis_data(arrangement={"genre_tags": []})
        response = client.post("/api/suno-pack/render", json={"analysis": data})
        assert response.status_code == 422

    def test_validate(self, client):
        response = client.post(
            "/api/suno-pack/validate", json={"style": "a" * 1001, "lyrics": "[Verse 1]"}
        )
        body = response.json()
        assert not body["valid"]
        assert body["checks"]["style_length"]["chars"] == 1001

    def test_validate_dir_missing(self, client):
        body = client.post("/api/suno-pack/validate-dir", json={"output_dir": "outputs/none"}).json()
        assert not body["valid"]
        assert body["errors"]


class TestNoteEndpoint:
    def test_note(self, client, store):
        store.write_yaml("analysis/song.yaml", analysis_data())
        response = client.post("/api/note", json={"analysis_path": "analysis/song.yaml"})
        assert response.status_code == 200
        assert response.json()["note_path"] == "notes/song.md"

    def test_note_missing(self, client):
        response = client.post("/api/note", json={"analysis_path": "analysis/none.yaml"})
        assert response.status_code == 404
