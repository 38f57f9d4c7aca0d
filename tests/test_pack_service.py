import pytest

from conftest import analysis_data
from music_factory.models.pack import AnalyzeReferenceSongRequest
from music_factory.services import pack_service
from music_factory.services.analysis_loader import load_analysis
from music_factory.services.style_generator import STYLE_MAX_CHARS
from music_factory.services.synthesizer import UnknownCoreTypeError


class TestGenerateTitle:
    def test_prefers_keyword(self, rich_analysis):
        assert pack_service.generate_title(rich_analysis) == "光と影"

    def test_short_reference_title(self, make_analysis):
        analysis = make_analysis(source_song={"title": "夜に駆ける"})
        assert pack_service.generate_title(analysis) == "夜に駆ける"

    def test_first_segment(self, make_analysis):
        analysis = make_analysis(source_song={"title": "Night Drive Across The City"})
        assert pack_service.generate_title(analysis) == "Night"

    def test_hard_cut(self, make_analysis):
        analysis = make_analysis(source_song={"title": "Supercalifragilistic"})
        assert pack_service.generate_title(analysis) == "Supercal"


class TestBuildSunoPack:
    def test_pack(self, rich_analysis):
        pack = pack_service.build_suno_pack(rich_analysis)
        assert pack.checks.suno_style_chars == len(pack.suno_style)
        assert pack.checks.within_1000_chars
        assert pack.checks.compact_style_chars == len(pack.suno_style_compact)
        assert pack.image_prompt.startswith("16:9 aspect ratio")
        assert pack.validation.valid

    def test_without_image_prompt(self, analysis):
        assert pack_service.build_suno_pack(analysis, include_image_prompt=False).image_prompt is None


class TestGenerateSunoPack:
    def test_writes_files(self, store):
        store.write_yaml("analysis/test_song.yaml", analysis_data())
        result = pack_service.generate_suno_pack("analysis/test_song.yaml", store=store)

        assert result.slug == "test_song"
        assert result.output_dir == "outputs/test_song"
        assert result.files.suno_style == "outputs/test_song/suno_style.txt"
        assert result.validation.valid
        for path in (result.files.title, result.files.suno_style, result.files.suno_lyrics):
            assert store.exists(path)
        style = store.read_text(result.files.suno_style)
        assert len(style) <= STYLE_MAX_CHARS
        assert store.read_text(result.files.image_prompt).startswith("16:9")

    def test_target_length_override(self, store):
        store.write_yaml("analysis/song.yaml", analysis_data())
        result = pack_service.generate_suno_pack(
            "analysis/song.yaml", target_length="5min", include_image_prompt=False, store=store
        )
        style = store.read_text(result.files.suno_style)
        assert "Aim for about 5 minutes." in style
        assert "Verse 3" in store.read_text(result.files.suno_lyrics)
        assert result.files.image_prompt is None
        assert not store.exists("outputs/song/image_prompt.txt")

    def test_missing_analysis(self, store):
        with pytest.raises(FileNotFoundError):
            pack_service.generate_suno_pack("analysis/missing.yaml", store=store)

    def test_from_saved_markdown(self, store, analysis_markdown):
        pack_service.save_song_analysis("yoasobi_yorunikakeru", analysis_markdown, store)
        result = pack_service.generate_suno_pack("analysis/yoasobi_yorunikakeru.md", store=store)
        assert result.validation.valid
        assert store.read_text(result.files.title) == "夜"


class TestValidateSunoPackDir:
    def test_written_pack(self, store):
        store.write_yaml("analysis/song.yaml", analysis_data())
        pack_service.generate_suno_pack("analysis/song.yaml", store=store)
        assert pack_service.validate_suno_pack_dir("outputs/song", store).valid

    def test_missing_files(self, store):
        result = pack_service.validate_suno_pack_dir("outputs/none", store)
        assert not result.valid
        assert result.errors == ["Files not found: suno_style.txt, suno_lyrics.txt"]

    def test_broken_lyrics(self, store):
        store.write_text("outputs/x/suno_style.txt", "Genre:\nPop")
        store.write_text("outputs/x/suno_lyrics.txt", "[Verse 1]\n[Chorus]")
        result = pack_service.validate_suno_pack_dir("outputs/x", store)
        assert not result.valid
        assert "Bridge" in result.checks.structure_complete.missing
        assert result.errors == []


class TestSaveSongAnalysis:
    def test_save(self, store, analysis_markdown):
        result = pack_service.save_song_analysis("yoasobi_yorunikakeru", analysis_markdown, store)
        assert result.analysis_path == "analysis/yoasobi_yorunikakeru.md"
        assert store.read_text(result.analysis_path) == analysis_markdown
        summary = result.parsed_summary
        assert summary.title == "夜に駆ける"
        assert summary.key == "E♭ minor"
        assert summary.key_mode == "minor"
        assert summary.sections_count == 11
        assert summary.keywords_count == 3
        assert result.validation.valid
        assert result.validation.warnings == []

    def test_warnings_for_thin_document(self, store):
        markdown = "---\ntitle: Song\n---\n\n## Music Structure\n\n1. Intro\n2. Chorus\n" + "\n" * 80
        result = pack_service.save_song_analysis("thin", markdown, store)
        assert not result.validation.valid
        assert "artist is required in frontmatter" in result.validation.warnings
        assert "概念キーワードが空です" in result.validation.warnings
        assert store.exists("analysis/thin.md")

    @pytest.mark.parametrize("slug", ["Bad Slug", "UPPER", "dots.md", ""])
    def test_bad_slug(self, store, analysis_markdown, slug):
        with pytest.raises(ValueError, match="slug"):
            pack_service.save_song_analysis(slug, analysis_markdown, store)

    def test_short_markdown(self, store):
        with pytest.raises(ValueError, match="at least 100"):
            pack_service.save_song_analysis("short", "---\ntitle: x\n---", store)


class TestAnalyzeReferenceSong:
    def test_writes_yaml(self, store):
        request = AnalyzeReferenceSongRequest(
            title="夜に駆ける", artist="YOASOBI", core_type="yoasobi", notes="fast"
        )
        result = pack_service.analyze_reference_song(request, store)
        assert result.slug == "yoasobi_夜に駆ける"
        assert result.analysis_path == "analysis/yoasobi_夜に駆ける.yaml"
        assert result.confidence.lyrics_design == "high"
        assert result.analysis_preview.startswith("source_song:")
        assert len(result.analysis_preview.splitlines()) <= 30
        assert any("genre tags" in w for w in result.warnings)

        analysis = load_analysis(result.analysis_path, store)
        assert analysis.core_type == "yoasobi"
        assert analysis.music_structure.tempo_bpm == 180

    def test_unknown_core_type(self, store):
        request = AnalyzeReferenceSongRequest(title="x", artist="y", core_type="nope")
        with pytest.raises(UnknownCoreTypeError):
            pack_service.analyze_reference_song(request, store)
        assert not store.resolve("analysis").exists()


class TestGenerateNote:
    def test_writes_note(self, store):
        store.write_yaml("analysis/song.yaml", analysis_data())
        result = pack_service.generate_note("analysis/song.yaml", store)
        assert result.note_path == "notes/song.md"
        assert result.slug == "song"
        assert len(result.preview.splitlines()) <= 20
        assert store.read_text("notes/song.md").startswith("---\ntitle:")
