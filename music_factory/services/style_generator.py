"""Render an Analysis into a Suno style prompt."""

from __future__ import annotations

import logging

from music_factory.models.analysis import Analysis, ChordSection
from music_factory.services.sections import format_section_chain, resolve_sections
from music_factory.services.translations import (
    translate_array,
    translate_chord_feel,
    translate_dynamics,
    translate_to_english,
)

log = logging.getLogger(__name__)

STYLE_MAX_CHARS = 1000
COMPACT_MAX_CHARS = 200
TRUNCATION_MARKER = "..."

_SEPARATORS = ("\n", " ", ",")
_TRAILING = " \t\n,.;:→/-"

# (exclusive upper bound, description), checked in order.
_TEMPO_BUCKETS: tuple[tuple[float, str], ...] = (
    (60, "Very slow tempo"),
    (80, "Slow, relaxed tempo"),
    (100, "Moderate tempo"),
    (120, "Medium, groovy tempo"),
    (140, "Upbeat tempo"),
    (160, "Fast, driving tempo"),
)
_TEMPO_FASTEST = "Very fast, aggressive tempo"

_LANGUAGE_NAMES = {
    "ja": "Japanese",
    "en": "English",
    "mixed": "Mixed Japanese and English",
}

_WORD_DENSITY_NOTES = {
    "high": "Rapid-fire delivery in verses.",
    "low": "Spacious phrasing with room to breathe.",
    "medium": "Balanced melodic phrasing.",
}

_ENERGY_LINES = {
    "wave": "Strong contrast between restrained verses and explosive choruses.",
    "build": "Continuous build-up toward climactic moments.",
    "flat": "Steady, even energy throughout.",
}

_COMPACT_STRUCTURE_HINTS = {
    "build": "builds to a climactic final chorus",
    "wave": "quiet verses, explosive choruses",
    "flat": "steady verse-chorus flow",
}


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:] if text else ""


def _sentence(text: str) -> str:
    text = _capitalize(text.strip())
    return text if text.endswith((".", "!", "?")) else f"{text}."


def get_tempo_description(bpm: float) -> str:
    for upper, description in _TEMPO_BUCKETS:
        if bpm < upper:
            return description
    return _TEMPO_FASTEST


def _format_bpm(bpm: int | float) -> str:
    return str(int(bpm)) if float(bpm).is_integer() else f"{bpm:g}"


def _chord_line(label: str, chord: ChordSection | None) -> str | None:
    if chord is None or not chord.pattern:
        return None
    if chord.feel:
        return f"{label}: {translate_chord_feel(chord.feel)} ({chord.pattern})."
    return f"{label}: {chord.pattern}."


def _genre_block(analysis: Analysis) -> list[str]:
    return [", ".join(translate_array(analysis.arrangement.genre_tags))]


def _style_block(analysis: Analysis) -> list[str]:
    arrangement = analysis.arrangement
    lyrics = analysis.lyrics_design
    lines: list[str] = []

    song = "Japanese song" if lyrics.language == "ja" else "song"
    if arrangement.dynamics:
        lines.append(f"{_capitalize(translate_dynamics(arrangement.dynamics))} {song}.")
    if arrangement.mood:
        lines.append(f"Mood: {', '.join(translate_array(arrangement.mood))}.")
    if lyrics.emotion_expression:
        lines.append(f"{_capitalize(translate_to_english(lyrics.emotion_expression))} expression.")
    lines.append(_ENERGY_LINES[analysis.music_structure.energy_curve])
    if arrangement.texture:
        lines.append(f"Texture: {translate_to_english(arrangement.texture)}.")
    return lines


def _tempo_block(analysis: Analysis) -> list[str]:
    bpm = analysis.music_structure.tempo_bpm
    return [f"{get_tempo_description(bpm)} ({_format_bpm(bpm)} BPM)."]


def _harmony_block(analysis: Analysis) -> list[str]:
    lines = [f"{_capitalize(analysis.music_structure.key_mode)} key."]
    chords = analysis.chord_progression
    if chords is not None:
        for label, chord in (
            ("Verse", chords.verse),
            ("Pre-Chorus", chords.prechorus),
            ("Chorus", chords.chorus),
            ("Bridge", chords.bridge),
        ):
            line = _chord_line(label, chord)
            if line:
                lines.append(line)
    return lines


def _structure_block(analysis: Analysis) -> list[str]:
    structure = analysis.music_structure
    minutes = structure.target_length.replace("min", "")
    sections = resolve_sections(structure.sections, structure.target_length)
    return [f"Aim for about {minutes} minutes.", format_section_chain(sections)]


def _arrangement_block(analysis: Analysis) -> list[str]:
    arrangement = analysis.arrangement
    lines: list[str] = []
    if arrangement.center:
        lines.append(f"{_capitalize(translate_to_english(arrangement.center))} centered.")
    if arrangement.instruments:
        lines.append(f"Instruments: {', '.join(translate_array(arrangement.instruments))}.")
    if arrangement.rhythm:
        lines.append(_sentence(translate_to_english(arrangement.rhythm)))
    if arrangement.bass:
        lines.append(_sentence(translate_to_english(arrangement.bass)))
    density = arrangement.density
    if density is not None:
        parts = [
            f"{name} {value}"
            for name, value in (
                ("verse", density.verse),
                ("chorus", density.chorus),
                ("final", density.final),
            )
            if value
        ]
        if parts:
            lines.append(f"Density: {', '.join(parts)}.")
    if arrangement.ear_candy:
        lines.append(f"Ear candy: {translate_to_english(arrangement.ear_candy)}.")
    return lines


def _vocals_block(analysis: Analysis) -> list[str]:
    lyrics = analysis.lyrics_design
    lines: list[str] = []
    vocal = lyrics.vocal_style
    if vocal is not None:
        voice = " ".join(
            part
            for part in (
                translate_to_english(vocal.gender) if vocal.gender else "",
                "vocals",
                f"({translate_to_english(vocal.range)} range)" if vocal.range else "",
            )
            if part
        )
        lines.append(_sentence(voice))
        if vocal.character:
            lines.append(f"Character: {', '.join(translate_array(vocal.character))}.")
        if vocal.techniques:
            lines.append(f"Techniques: {', '.join(translate_array(vocal.techniques))}.")

    lines.append(_WORD_DENSITY_NOTES[lyrics.word_density or "medium"])
    if lyrics.chorus_hook_rule and lyrics.chorus_hook_rule.repeat_short_phrase:
        lines.append("Chorus should be catchy and repeatable.")
    return lines


def _lyrics_block(analysis: Analysis) -> list[str]:
    lyrics = analysis.lyrics_design
    lines = [f"{_LANGUAGE_NAMES[lyrics.language]} lyrics."]
    if lyrics.perspective:
        perspective = translate_to_english(lyrics.perspective).replace("_", " ")
        lines.append(f"{_capitalize(perspective)} perspective.")
    if lyrics.theme:
        lines.append(f"Theme: {', '.join(translate_array(lyrics.theme))}.")
    if lyrics.scenery:
        lines.append(f"{_capitalize(translate_to_english(lyrics.scenery))} scenery.")
    if lyrics.chorus_hook_rule and lyrics.chorus_hook_rule.avoid_direct_emotion_words:
        lines.append("Avoid direct emotion words; use imagery instead.")
    return lines


_BLOCKS = (
    ("Genre", _genre_block),
    ("Style", _style_block),
    ("Tempo", _tempo_block),
    ("Harmony", _harmony_block),
    ("Length / Structure", _structure_block),
    ("Arrangement", _arrangement_block),
    ("Vocals", _vocals_block),
    ("Lyrics", _lyrics_block),
)


def truncate_at_separator(
    text: str, max_chars: int, marker: str = TRUNCATION_MARKER
) -> str:
    """Shorten ``text`` to at most ``max_chars`` without splitting a token.

    The cut lands on the last newline, space or comma that leaves room for
    ``marker``; trailing separators and punctuation are dropped before the
    marker is appended. Text with no usable separator is hard-cut.
    """
    if len(text) <= max_chars:
        return text
    budget = max_chars - len(marker)
    if budget <= 0:
        return marker[:max_chars]

    window = text[: budget + 1]
    cut = max(window.rfind(sep) for sep in _SEPARATORS)
    head = window[:cut].rstrip(_TRAILING) if cut > 0 else ""
    if not head:
        head = text[:budget]
    return head + marker


def generate_style(analysis: Analysis, max_chars: int = STYLE_MAX_CHARS) -> str:
    """Build the multi-block style prompt.

    Blocks are emitted in a fixed order as ``Label:`` followed by their lines
    and separated by a blank line. Blocks with nothing to say are left out.
    The result never exceeds ``max_chars``.
    """
    blocks = []
    for label, render in _BLOCKS:
        lines = [line for line in render(analysis) if line]
        if lines:
            blocks.append(f"{label}:\n" + "\n".join(lines))

    style = "\n\n".join(blocks)
    if len(style) > max_chars:
        log.warning(
            "Style prompt for %r is %d chars, truncating to %d",
            analysis.source_song.title,
            len(style),
            max_chars,
        )
        style = truncate_at_separator(style, max_chars)
    return style


def generate_compact_style(analysis: Analysis) -> str:
    """Single-line style summary aimed at ``COMPACT_MAX_CHARS``.

    Overlong output is logged, not shortened.
    """
    arrangement = analysis.arrangement
    parts = translate_array(arrangement.genre_tags[:2])

    if arrangement.mood:
        parts.append(translate_to_english(arrangement.mood[0]))

    if arrangement.center:
        parts.append(translate_to_english(arrangement.center))
    elif arrangement.instruments:
        parts.append(translate_to_english(arrangement.instruments[0]))

    vocal = analysis.lyrics_design.vocal_style
    if vocal is not None and (vocal.gender or vocal.character):
        descriptor = vocal.character[0] if vocal.character else vocal.gender
        if vocal.gender and vocal.character:
            descriptor = f"{vocal.character[0]} {vocal.gender}"
        parts.append(f"{translate_to_english(descriptor)} vocals")

    parts.append(_COMPACT_STRUCTURE_HINTS[analysis.music_structure.energy_curve])

    compact = ", ".join(p for p in parts if p)
    if len(compact) > COMPACT_MAX_CHARS:
        log.warning(
            "Compact style is %d chars, over the %d char target",
            len(compact),
            COMPACT_MAX_CHARS,
        )
    return compact


def get_style_char_count(style: str) -> int:
    return len(style)


def is_style_within_limit(style: str, limit: int = STYLE_MAX_CHARS) -> bool:
    return len(style) <= limit
