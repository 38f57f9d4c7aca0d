"""Synthesize an Analysis from a core-type preset plus user notes.

No recording is consulted. Everything comes from the preset (abstracted
style traits) and the caller's metadata, and chord patterns stay in Roman
numerals, so the result is an estimate rather than a transcription.
"""

from __future__ import annotations

import logging
import re

from music_factory.models.analysis import (
    Analysis,
    Arrangement,
    ChordProgression,
    ChordSection,
    ChorusHookRule,
    Density,
    LyricsDesign,
    MusicStructure,
    Section,
    SourceSong,
)
from music_factory.models.core_type import CoreTypePattern, TempoRange
from music_factory.models.pack import AnalyzeReferenceSongRequest, Confidence
from music_factory.services.patterns import get_core_type_pattern, is_core_type, list_core_types

log = logging.getLogger(__name__)

MAX_KEYWORDS = 10
MAX_NOTE_KEYWORDS = 3
MAX_THEMES = 3
MAX_SLUG_LENGTH = 50

_SLOW_WORDS = ("slow", "ゆっくり", "バラード")
_FAST_WORDS = ("fast", "速い", "アップテンポ")
_SHORT_WORDS = ("short", "短い", "シンプル")
_SHORT_DROPPED = frozenset({Section.POST_CHORUS, Section.INSTRUMENTAL, Section.FINAL_CHORUS_REPEAT})

_NOTE_SPLIT_RE = re.compile(r"[、,\s]+")
_SLUG_STRIP_RE = re.compile(r"[^a-z0-9\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]+")


class UnknownCoreTypeError(ValueError):
    """Raised when a caller names a core type that is not registered."""

    def __init__(self, core_type: str):
        self.core_type = core_type
        self.available = list_core_types()
        super().__init__(
            f"Unknown core_type: {core_type}. Available: {', '.join(self.available)}"
        )


def generate_slug(artist: str, title: str) -> str:
    """File-safe slug; keeps kana and kanji, collapses everything else to ``_``."""
    slug = _SLUG_STRIP_RE.sub("_", f"{artist}_{title}".lower()).strip("_")
    return slug[:MAX_SLUG_LENGTH]


def estimate_tempo(notes: str | None, tempo_range: TempoRange) -> int:
    lower = (notes or "").lower()
    if any(word in lower for word in _SLOW_WORDS):
        return tempo_range.min
    if any(word in lower for word in _FAST_WORDS):
        return tempo_range.max
    return tempo_range.typical


def adjust_sections(base: tuple[Section, ...], notes: str | None) -> list[Section]:
    """Drop the optional sections when the notes ask for a short song."""
    lower = (notes or "").lower()
    if any(word in lower for word in _SHORT_WORDS):
        return [s for s in base if s not in _SHORT_DROPPED]
    return list(base)


def generate_keywords(pattern_keywords: tuple[str, ...], notes: str | None) -> list[str]:
    keywords = list(pattern_keywords)
    if notes:
        words = [w for w in _NOTE_SPLIT_RE.split(notes) if 2 <= len(w) <= 6]
        keywords.extend(words[:MAX_NOTE_KEYWORDS])
    return list(dict.fromkeys(keywords))[:MAX_KEYWORDS]


def _chord(pattern) -> ChordSection:
    return ChordSection(feel=pattern.feel, pattern=pattern.pattern)


def build_analysis(request: AnalyzeReferenceSongRequest, pattern: CoreTypePattern) -> Analysis:
    hook_rules = pattern.lyrics_design.chorus_hook_rule
    density = pattern.arrangement.density

    return Analysis(
        source_song=SourceSong(title=request.title, artist=request.artist),
        core_type=pattern.name,
        music_structure=MusicStructure(
            target_length=request.target_length,
            tempo_bpm=estimate_tempo(request.notes, pattern.tempo_range),
            key_mode="major" if pattern.key_mode == "both" else pattern.key_mode,
            energy_curve=pattern.energy_curve,
            sections=adjust_sections(pattern.default_sections, request.notes),
        ),
        chord_progression=ChordProgression(
            notation="roman_numerals",
            verse=_chord(pattern.chord_patterns.verse),
            prechorus=_chord(pattern.chord_patterns.prechorus),
            chorus=_chord(pattern.chord_patterns.chorus),
            bridge=_chord(pattern.chord_patterns.bridge),
        ),
        arrangement=Arrangement(
            genre_tags=(request.genre_tags or list(pattern.genre_tags))[:4],
            center=pattern.arrangement.center,
            rhythm=pattern.arrangement.rhythm,
            bass=pattern.arrangement.bass,
            density=Density(verse=density.verse, chorus=density.chorus, final=density.final),
            dynamics=pattern.arrangement.dynamics,
            ear_candy=pattern.arrangement.ear_candy,
        ),
        lyrics_design=LyricsDesign(
            language="ja",
            perspective=pattern.lyrics_design.perspective,
            scenery=pattern.lyrics_design.scenery,
            emotion_expression=pattern.lyrics_design.emotion_expression,
            word_density=pattern.lyrics_design.word_density,
            theme=list(pattern.typical_themes[:MAX_THEMES]),
            chorus_hook_rule=ChorusHookRule(
                repeat_short_phrase="repeat_short_phrase" in hook_rules,
                avoid_direct_emotion_words="avoid_direct_emotion_words" in hook_rules,
            ),
        ),
        concept_keywords=generate_keywords(pattern.typical_keywords, request.notes),
    )


def synthesize_analysis(request: AnalyzeReferenceSongRequest) -> Analysis:
    """Build an Analysis for ``request`` from its core-type preset.

    Raises:
        UnknownCoreTypeError: ``request.core_type`` is not a registered preset.
    """
    if not is_core_type(request.core_type):
        raise UnknownCoreTypeError(request.core_type)

    pattern = get_core_type_pattern(request.core_type)
    analysis = build_analysis(request, pattern)
    log.info(
        "Synthesized analysis for %r by %r from core type %s",
        request.title,
        request.artist,
        pattern.name,
    )
    return analysis


def estimate_confidence(request: AnalyzeReferenceSongRequest) -> Confidence:
    # Structure follows well-known patterns; chords and arrangement are estimates.
    return Confidence(
        structure="high",
        arrangement="medium",
        chords_functional="medium",
        lyrics_design="high" if request.notes else "medium",
    )
