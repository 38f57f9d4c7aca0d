"""Load an Analysis from YAML or analysis markdown."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from music_factory.models.analysis import (
    Analysis,
    Arrangement,
    ChordProgression,
    ChordSection,
    Density,
    LyricsDesign,
    MusicStructure,
    Section,
    SourceSong,
)
from music_factory.models.parsed_analysis import ParsedAnalysis
from music_factory.preprocessing.analysis_markdown import (
    parse_analysis_markdown,
    validate_parsed_analysis,
)
from music_factory.services.storage import DataStore

log = logging.getLogger(__name__)

FALLBACK_SECTIONS = (
    Section.INTRO,
    Section.VERSE1,
    Section.CHORUS,
    Section.VERSE2,
    Section.CHORUS,
    Section.BRIDGE,
    Section.FINAL_CHORUS,
    Section.OUTRO,
)
FALLBACK_GENRE = "Japanese Pop"

_SECTION_KEYS = {
    "intro": Section.INTRO,
    "verse1": Section.VERSE1,
    "verse2": Section.VERSE2,
    "verse3": Section.VERSE3,
    "prechorus": Section.PRE_CHORUS,
    "chorus": Section.CHORUS,
    "hook": Section.CHORUS,
    "postchorus": Section.POST_CHORUS,
    "instrumental": Section.INSTRUMENTAL,
    "interlude": Section.INSTRUMENTAL,
    "solo": Section.INSTRUMENTAL,
    "drop": Section.DROP,
    "breakdown": Section.BREAKDOWN,
    "bridge": Section.BRIDGE,
    "finalchorus": Section.FINAL_CHORUS,
    "lastchorus": Section.FINAL_CHORUS,
    "finalchorusrepeat": Section.FINAL_CHORUS_REPEAT,
    "outro": Section.OUTRO,
}

# Checked in order; longer names first so 大サビ wins over サビ.
_JAPANESE_SECTIONS: tuple[tuple[str, Section | None], ...] = (
    ("大サビ", Section.FINAL_CHORUS),
    ("落ちサビ", Section.BREAKDOWN),
    ("サビ", Section.CHORUS),
    ("Aメロ", None),
    ("Bメロ", Section.PRE_CHORUS),
    ("Cメロ", Section.BRIDGE),
    ("ブリッジ", Section.BRIDGE),
    ("間奏", Section.INSTRUMENTAL),
    ("イントロ", Section.INTRO),
    ("アウトロ", Section.OUTRO),
    ("ドロップ", Section.DROP),
)

_VERSES = (Section.VERSE1, Section.VERSE2, Section.VERSE3)

_CHORD_KEYS = {
    "verse": "verse",
    "aメロ": "verse",
    "prechorus": "prechorus",
    "bメロ": "prechorus",
    "chorus": "chorus",
    "サビ": "chorus",
    "bridge": "bridge",
    "cメロ": "bridge",
    "ブリッジ": "bridge",
}

_PAREN_RE = re.compile(r"（.*?）|\(.*?\)")
_LABEL_END_RE = re.compile(r"[:：]|\s[-–—]\s")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


class InvalidAnalysisError(ValueError):
    """The analysis document is structurally invalid."""


def _section_label(raw: str) -> str:
    label = _PAREN_RE.sub("", raw.replace("**", ""))
    return _LABEL_END_RE.split(label, maxsplit=1)[0].strip()


def map_section_names(names: list[str]) -> list[Section]:
    """Map free-form section names (English or Japanese) onto ``Section``.

    A bare "Verse" or "Aメロ" is numbered by how many verses came before it.
    Unrecognized names are dropped.
    """
    sections: list[Section] = []
    verse_count = 0

    for raw in names:
        label = _section_label(raw)
        section: Section | None = None
        is_verse = False
        number = re.search(r"(\d+)\s*$", label)

        for keyword, mapped in _JAPANESE_SECTIONS:
            if keyword in label:
                section = mapped
                is_verse = mapped is None
                break
        else:
            key = re.sub(r"[\s/_-]+", "", label).lower()
            if key.rstrip("0123456789") == "verse":
                is_verse = True
            else:
                section = _SECTION_KEYS.get(key) or _SECTION_KEYS.get(key.rstrip("0123456789"))

        if is_verse:
            verse_count += 1
            index = int(number.group(1)) if number else verse_count
            section = _VERSES[min(max(index, 1), len(_VERSES)) - 1]

        if section is None:
            log.debug("Skipping unrecognized section %r", raw)
            continue
        sections.append(section)

    return sections


def map_energy_curve(curve: str) -> str:
    lower = curve.lower()
    if "flat" in lower or "一定" in curve:
        return "flat"
    if "build" in lower or "上昇" in curve:
        return "build"
    return "wave"


def map_word_density(density: str) -> str:
    lower = density.lower()
    if "高" in density or "high" in lower:
        return "high"
    if "低" in density or "low" in lower:
        return "low"
    return "medium"


def map_target_length(text: str) -> str:
    """``~3:30`` -> ``3min``, ``5分`` -> ``5min``; anything else is ``3min``."""
    match = re.search(r"\d+", text)
    minutes = int(match.group(0)) if match else 3
    if minutes >= 5:
        return "5min"
    if minutes == 4:
        return "4min"
    return "3min"


def default_tempo_for_length(target_length: str) -> int:
    return {"5min": 90, "4min": 110}.get(target_length, 130)


def _parse_tempo(text: str | None) -> float | None:
    if not text:
        return None
    match = _NUMBER_RE.search(text)
    if not match:
        return None
    bpm = float(match.group(0))
    if not 40 <= bpm <= 300:
        log.warning("Ignoring out-of-range tempo %r", text)
        return None
    return int(bpm) if bpm.is_integer() else bpm


def _chord_progression(parsed: ParsedAnalysis) -> ChordProgression:
    fields: dict[str, ChordSection] = {}
    for header, detail in parsed.chord_progression.sections.items():
        key = re.sub(r"[\s/_-]+", "", _PAREN_RE.sub("", header)).lower()
        slot = _CHORD_KEYS.get(key)
        if slot and slot not in fields:
            fields[slot] = ChordSection(feel=detail.feel or None, pattern=detail.pattern or None)
    return ChordProgression(notation="roman_numerals", **fields)


def _instrument_for(parsed: ParsedAnalysis, *parts: str) -> list[str]:
    return [
        entry.instrument
        for entry in parsed.arrangement.instruments
        if entry.part in parts or entry.part.lower() in parts
    ]


def convert_parsed_to_analysis(parsed: ParsedAnalysis) -> Analysis:
    """Fill an Analysis from parsed markdown, substituting defaults for gaps."""
    sections = map_section_names(parsed.structure.sections) or list(FALLBACK_SECTIONS)
    target_length = map_target_length(parsed.structure.target_length)
    tempo = _parse_tempo(parsed.structure.tempo) or default_tempo_for_length(target_length)

    instruments = [entry.instrument for entry in parsed.arrangement.instruments]
    rhythm = _instrument_for(parsed, "リズム", "rhythm", "drums", "ドラム")
    bass = _instrument_for(parsed, "ベース", "bass")
    ear_candy = _instrument_for(parsed, "効果", "fx", "effects", "ear candy")
    density = parsed.arrangement.density
    lyrics = parsed.lyrics_design

    return Analysis(
        source_song=SourceSong(title=parsed.title, artist=parsed.artist or None),
        music_structure=MusicStructure(
            target_length=target_length,
            tempo_bpm=tempo,
            key_mode=parsed.chord_progression.key_mode,
            energy_curve=map_energy_curve(parsed.structure.energy_curve),
            sections=sections,
        ),
        chord_progression=_chord_progression(parsed),
        arrangement=Arrangement(
            genre_tags=parsed.arrangement.genre_tags[:4] or [FALLBACK_GENRE],
            center=instruments[0] if instruments else None,
            instruments=instruments or None,
            rhythm=rhythm[0] if rhythm else None,
            bass=bass[0] if bass else None,
            density=Density(verse=density.verse, chorus=density.chorus, final=density.final_chorus),
            dynamics=parsed.arrangement.design or None,
            ear_candy=", ".join(ear_candy) or None,
        ),
        lyrics_design=LyricsDesign(
            language=lyrics.language,
            perspective=lyrics.perspective or None,
            emotion_expression=lyrics.emotion_handling or None,
            word_density=map_word_density(lyrics.word_density),
            theme=lyrics.themes or None,
        ),
        concept_keywords=parsed.concept_keywords or None,
    )


def is_markdown(content: str, filename: str | None = None) -> bool:
    if filename and filename.lower().endswith(".md"):
        return True
    return content.lstrip().startswith("---")


def load_analysis_text(content: str, filename: str | None = None) -> Analysis:
    """Build an Analysis from file content, choosing markdown or YAML.

    Raises:
        InvalidAnalysisError: the content does not describe a valid analysis.
    """
    if is_markdown(content, filename):
        parsed = parse_analysis_markdown(content)
        validation = validate_parsed_analysis(parsed)
        if not validation.valid:
            raise InvalidAnalysisError(
                f"Invalid analysis markdown: {'; '.join(validation.errors)}"
            )
        try:
            return convert_parsed_to_analysis(parsed)
        except ValidationError as exc:
            raise InvalidAnalysisError(f"Invalid analysis markdown: {exc}") from exc

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise InvalidAnalysisError(f"Invalid analysis file: {exc}") from exc
    if not isinstance(raw, dict):
        raise InvalidAnalysisError("Invalid analysis file: expected a mapping at the top level")

    try:
        return Analysis.model_validate(raw)
    except ValidationError as exc:
        raise InvalidAnalysisError(f"Invalid analysis file: {exc}") from exc


def load_analysis(path: str | Path, store: DataStore | None = None) -> Analysis:
    """Read and load an analysis file relative to the data directory."""
    store = store or DataStore()
    content = store.read_text(path)
    analysis = load_analysis_text(content, filename=str(path))
    log.info("Loaded analysis %s (%r)", path, analysis.source_song.title)
    return analysis
