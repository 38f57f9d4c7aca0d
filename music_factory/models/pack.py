from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from music_factory.models.analysis import TargetLength

ConfidenceLevel = Literal["high", "medium", "low"]


class StyleLengthCheck(BaseModel):
    ok: bool
    chars: int
    limit: int = 1000


class LyricsSectionsCheck(BaseModel):
    ok: bool
    found: list[str]
    required: list[str]


class StructureCompleteCheck(BaseModel):
    ok: bool
    missing: list[str]


class ValidationChecks(BaseModel):
    style_length: StyleLengthCheck
    lyrics_sections: LyricsSectionsCheck
    structure_complete: StructureCompleteCheck


class ValidationResult(BaseModel):
    """Pass/fail report for a style prompt and lyrics sheet."""
    valid: bool
    checks: ValidationChecks
    errors: list[str] = Field(
        default_factory=list, description="File-level problems, e.g. missing pack files"
    )


class PackChecks(BaseModel):
    suno_style_chars: int
    within_1000_chars: bool
    compact_style_chars: int


class SunoPack(BaseModel):
    """All text artifacts rendered from one analysis."""
    title: str
    suno_style: str
    suno_style_compact: str
    suno_lyrics: str
    image_prompt: str | None = None
    checks: PackChecks
    validation: ValidationResult


class AnalyzeReferenceSongRequest(BaseModel):
    """Metadata for synthesizing an analysis from a core-type preset."""

    title: str = Field(min_length=1, description="Reference song title")
    artist: str = Field(min_length=1, description="Reference artist")
    core_type: str = Field(min_length=1, description="Preset name, e.g. 'yorushika'")
    target_length: TargetLength = "3min"
    genre_tags: list[str] | None = Field(default=None, max_length=4)
    notes: str | None = Field(default=None, description="Free-form notes ('slow', 'short', keywords)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "夜に駆ける",
                "artist": "YOASOBI",
                "core_type": "yoasobi",
                "target_length": "3min",
                "notes": "fast, 夜 疾走感",
            }
        }
    )


class Confidence(BaseModel):
    structure: ConfidenceLevel
    arrangement: ConfidenceLevel
    chords_functional: ConfidenceLevel
    lyrics_design: ConfidenceLevel


class AnalyzeReferenceSongResult(BaseModel):
    analysis_path: str
    slug: str
    confidence: Confidence
    analysis_preview: str = Field(description="First 30 lines of the written YAML")
    warnings: list[str]
    next_actions: list[str]


class PackFiles(BaseModel):
    title: str
    suno_style: str
    suno_lyrics: str
    image_prompt: str | None = None


class GenerateSunoPackResult(BaseModel):
    slug: str
    output_dir: str
    files: PackFiles
    checks: PackChecks
    validation: ValidationResult


class ParsedSummary(BaseModel):
    title: str
    artist: str
    key: str
    key_mode: Literal["major", "minor"]
    sections_count: int
    keywords_count: int


class SaveValidation(BaseModel):
    valid: bool
    warnings: list[str]


class SaveSongAnalysisResult(BaseModel):
    analysis_path: str
    parsed_summary: ParsedSummary
    validation: SaveValidation
    next_actions: list[str]


class GenerateNoteResult(BaseModel):
    note_path: str
    slug: str
    preview: str = Field(description="First 20 lines of the note")
    next_actions: list[str]
