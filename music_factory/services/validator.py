"""Structural checks for a generated style prompt and lyrics sheet."""

from __future__ import annotations

from typing import Sequence

from music_factory.models.pack import (
    LyricsSectionsCheck,
    StructureCompleteCheck,
    StyleLengthCheck,
    ValidationChecks,
    ValidationResult,
)
from music_factory.services.lyrics_generator import REQUIRED_SECTIONS, extract_sections
from music_factory.services.style_generator import (
    STYLE_MAX_CHARS,
    get_style_char_count,
    is_style_within_limit,
)


def _missing(found: Sequence[str], required: Sequence[str]) -> list[str]:
    return [name for name in required if not any(name in marker for marker in found)]


def validate_style_length(style: str) -> StyleLengthCheck:
    return StyleLengthCheck(
        ok=is_style_within_limit(style, STYLE_MAX_CHARS),
        chars=get_style_char_count(style),
        limit=STYLE_MAX_CHARS,
    )


def validate_lyrics_sections(lyrics: str) -> LyricsSectionsCheck:
    found = extract_sections(lyrics)
    return LyricsSectionsCheck(
        ok=not _missing(found, REQUIRED_SECTIONS),
        found=found,
        required=list(REQUIRED_SECTIONS),
    )


def validate_structure_complete(lyrics: str) -> StructureCompleteCheck:
    missing = _missing(extract_sections(lyrics), REQUIRED_SECTIONS)
    return StructureCompleteCheck(ok=not missing, missing=missing)


def validate_suno_pack(style: str, lyrics: str) -> ValidationResult:
    """Run every check; the pack is valid only when all of them pass."""
    style_length = validate_style_length(style)
    lyrics_sections = validate_lyrics_sections(lyrics)
    structure_complete = validate_structure_complete(lyrics)

    return ValidationResult(
        valid=style_length.ok and lyrics_sections.ok and structure_complete.ok,
        checks=ValidationChecks(
            style_length=style_length,
            lyrics_sections=lyrics_sections,
            structure_complete=structure_complete,
        ),
    )
