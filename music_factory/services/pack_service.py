"""File-level operations: save analyses, render and validate Suno packs, write notes."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from music_factory.models.analysis import Analysis, TargetLength
from music_factory.models.pack import (
    AnalyzeReferenceSongRequest,
    AnalyzeReferenceSongResult,
    GenerateNoteResult,
    GenerateSunoPackResult,
    LyricsSectionsCheck,
    PackChecks,
    PackFiles,
    ParsedSummary,
    SaveSongAnalysisResult,
    SaveValidation,
    StructureCompleteCheck,
    StyleLengthCheck,
    SunoPack,
    ValidationChecks,
    ValidationResult,
)
from music_factory.preprocessing.analysis_markdown import (
    parse_analysis_markdown,
    validate_parsed_analysis,
)
from music_factory.services.analysis_loader import load_analysis
from music_factory.services.image_prompt_generator import generate_image_prompt
from music_factory.services.lyrics_generator import REQUIRED_SECTIONS, generate_lyrics
from music_factory.services.note_generator import build_note_content
from music_factory.services.storage import (
    ANALYSIS_DIR,
    NOTES_DIR,
    OUTPUTS_DIR,
    DataStore,
    extract_slug,
)
from music_factory.services.style_generator import (
    STYLE_MAX_CHARS,
    generate_compact_style,
    generate_style,
    is_style_within_limit,
)
from music_factory.services.synthesizer import (
    estimate_confidence,
    generate_slug,
    synthesize_analysis,
)
from music_factory.services.validator import validate_suno_pack

log = logging.getLogger(__name__)

TITLE_MAX_CHARS = 8
MIN_MARKDOWN_CHARS = 100
ANALYSIS_PREVIEW_LINES = 30
NOTE_PREVIEW_LINES = 20

TITLE_FILE = "title.txt"
STYLE_FILE = "suno_style.txt"
LYRICS_FILE = "suno_lyrics.txt"
IMAGE_PROMPT_FILE = "image_prompt.txt"

_SLUG_RE = re.compile(r"^[a-z0-9_-]+$")
_TITLE_SPLIT_RE = re.compile(r"[、。\s]")


def _preview(text: str, lines: int) -> str:
    return "\n".join(text.splitlines()[:lines])


def generate_title(analysis: Analysis) -> str:
    """Short working title, at most 8 characters.

    Prefers the first concept keyword, then the reference title or its first
    segment. The reference title itself is only a fallback placeholder.
    """
    keywords = analysis.concept_keywords or []
    if keywords and 0 < len(keywords[0]) <= TITLE_MAX_CHARS:
        return keywords[0]

    base = analysis.source_song.title
    if len(base) <= TITLE_MAX_CHARS:
        return base
    first = _TITLE_SPLIT_RE.split(base)[0]
    if 0 < len(first) <= TITLE_MAX_CHARS:
        return first
    return base[:TITLE_MAX_CHARS]


def build_suno_pack(analysis: Analysis, include_image_prompt: bool = True) -> SunoPack:
    """Render every artifact for ``analysis`` without touching the filesystem."""
    style = generate_style(analysis)
    compact = generate_compact_style(analysis)
    lyrics = generate_lyrics(analysis)

    return SunoPack(
        title=generate_title(analysis),
        suno_style=style,
        suno_style_compact=compact,
        suno_lyrics=lyrics,
        image_prompt=generate_image_prompt(analysis) if include_image_prompt else None,
        checks=PackChecks(
            suno_style_chars=len(style),
            within_1000_chars=is_style_within_limit(style),
            compact_style_chars=len(compact),
        ),
        validation=validate_suno_pack(style, lyrics),
    )


def generate_suno_pack(
    analysis_path: str,
    target_length: TargetLength | None = None,
    include_image_prompt: bool = True,
    store: DataStore | None = None,
) -> GenerateSunoPackResult:
    """Load an analysis file and write its pack under ``outputs/<slug>/``."""
    store = store or DataStore()
    analysis = load_analysis(analysis_path, store)
    if target_length and target_length != analysis.music_structure.target_length:
        structure = analysis.music_structure.model_copy(update={"target_length": target_length})
        analysis = analysis.model_copy(update={"music_structure": structure})

    slug = extract_slug(analysis_path)
    output_dir = Path(OUTPUTS_DIR) / slug
    pack = build_suno_pack(analysis, include_image_prompt)

    store.write_text(output_dir / TITLE_FILE, pack.title)
    store.write_text(output_dir / STYLE_FILE, pack.suno_style)
    store.write_text(output_dir / LYRICS_FILE, pack.suno_lyrics)
    image_prompt_path = None
    if pack.image_prompt is not None:
        store.write_text(output_dir / IMAGE_PROMPT_FILE, pack.image_prompt)
        image_prompt_path = (output_dir / IMAGE_PROMPT_FILE).as_posix()

    if not pack.validation.valid:
        log.warning("Pack %s failed validation: %s", slug, pack.validation.checks.model_dump())
    log.info("Generated Suno pack %s (%d style chars)", slug, pack.checks.suno_style_chars)

    return GenerateSunoPackResult(
        slug=slug,
        output_dir=output_dir.as_posix(),
        files=PackFiles(
            title=(output_dir / TITLE_FILE).as_posix(),
            suno_style=(output_dir / STYLE_FILE).as_posix(),
            suno_lyrics=(output_dir / LYRICS_FILE).as_posix(),
            image_prompt=image_prompt_path,
        ),
        checks=pack.checks,
        validation=pack.validation,
    )


def validate_suno_pack_dir(output_dir: str, store: DataStore | None = None) -> ValidationResult:
    """Validate the style and lyrics files of a written pack.

    Missing files give a failed result naming them instead of raising.
    """
    store = store or DataStore()
    style_path = Path(output_dir) / STYLE_FILE
    lyrics_path = Path(output_dir) / LYRICS_FILE

    missing = [p.name for p in (style_path, lyrics_path) if not store.exists(p)]
    if missing:
        message = f"Files not found: {', '.join(missing)}"
        log.warning("Cannot validate %s: %s", output_dir, message)
        return ValidationResult(
            valid=False,
            checks=ValidationChecks(
                style_length=StyleLengthCheck(ok=False, chars=0, limit=STYLE_MAX_CHARS),
                lyrics_sections=LyricsSectionsCheck(
                    ok=False, found=[], required=list(REQUIRED_SECTIONS)
                ),
                structure_complete=StructureCompleteCheck(ok=False, missing=[message]),
            ),
            errors=[message],
        )

    return validate_suno_pack(store.read_text(style_path), store.read_text(lyrics_path))


def save_song_analysis(
    slug: str, markdown: str, store: DataStore | None = None
) -> SaveSongAnalysisResult:
    """Check and store an analysis markdown document as ``analysis/<slug>.md``.

    Raises:
        ValueError: the slug is malformed or the markdown is too short to be
            an analysis.
    """
    if not _SLUG_RE.match(slug):
        raise ValueError("slug must be lowercase alphanumeric with underscores or hyphens")
    if len(markdown) < MIN_MARKDOWN_CHARS:
        raise ValueError(f"markdown must be at least {MIN_MARKDOWN_CHARS} characters")

    store = store or DataStore()
    parsed = parse_analysis_markdown(markdown)
    validation = validate_parsed_analysis(parsed)

    warnings = list(validation.errors)
    if not parsed.essence:
        warnings.append("曲の本質セクションが空です")
    if not parsed.concept_keywords:
        warnings.append("概念キーワードが空です")
    if not parsed.arrangement.instruments:
        warnings.append("楽器構成テーブルが見つかりません")
    if not parsed.chord_progression.sections:
        warnings.append("コード進行セクションが見つかりません")
    for warning in warnings:
        log.warning("Analysis %s: %s", slug, warning)

    analysis_path = f"{ANALYSIS_DIR}/{slug}.md"
    store.write_text(analysis_path, markdown)

    return SaveSongAnalysisResult(
        analysis_path=analysis_path,
        parsed_summary=ParsedSummary(
            title=parsed.title,
            artist=parsed.artist,
            key=parsed.chord_progression.key,
            key_mode=parsed.chord_progression.key_mode,
            sections_count=len(parsed.structure.sections),
            keywords_count=len(parsed.concept_keywords),
        ),
        validation=SaveValidation(valid=validation.valid, warnings=warnings),
        next_actions=[
            f"generate_suno_pack(analysis_path={analysis_path!r})",
            f"generate_note(analysis_path={analysis_path!r})",
        ],
    )


def analyze_reference_song(
    request: AnalyzeReferenceSongRequest, store: DataStore | None = None
) -> AnalyzeReferenceSongResult:
    """Synthesize an analysis for a reference song and store it as YAML."""
    store = store or DataStore()
    analysis = synthesize_analysis(request)
    slug = generate_slug(request.artist, request.title)

    analysis_path = f"{ANALYSIS_DIR}/{slug}.yaml"
    data = analysis.model_dump(mode="json", exclude_none=True)
    store.write_yaml(analysis_path, data)
    content = store.read_text(analysis_path)

    warnings = [
        "Chord progressions are functional-harmony estimates in Roman numerals.",
        "Values are abstracted from the core type; no recording was analysed.",
    ]
    if not request.notes:
        warnings.append("No notes given; lyrics design uses core type defaults only.")
    if not request.genre_tags:
        warnings.append("No genre tags given; using core type defaults.")

    return AnalyzeReferenceSongResult(
        analysis_path=analysis_path,
        slug=slug,
        confidence=estimate_confidence(request),
        analysis_preview=_preview(content, ANALYSIS_PREVIEW_LINES),
        warnings=warnings,
        next_actions=[
            f"generate_suno_pack(analysis_path={analysis_path!r})",
            f"generate_note(analysis_path={analysis_path!r})",
        ],
    )


def generate_note(analysis_path: str, store: DataStore | None = None) -> GenerateNoteResult:
    """Write a note.com article draft for an analysis to ``notes/<slug>.md``."""
    store = store or DataStore()
    analysis = load_analysis(analysis_path, store)
    slug = extract_slug(analysis_path)

    content = build_note_content(analysis, slug)
    note_path = f"{NOTES_DIR}/{slug}.md"
    store.write_text(note_path, content)

    return GenerateNoteResult(
        note_path=note_path,
        slug=slug,
        preview=_preview(content, NOTE_PREVIEW_LINES),
        next_actions=[
            f"generate_suno_pack(analysis_path={analysis_path!r})",
            "Edit the note draft to add personal insights and context",
        ],
    )
