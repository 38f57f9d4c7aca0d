"""Core-type style presets.

Each preset abstracts the general stylistic traits of an artist or sub-genre
(structure, tempo, functional harmony, arrangement, lyrics approach). Nothing
here is taken from a specific recording; chord patterns are Roman-numeral
estimates.
"""

from __future__ import annotations

import logging
from types import MappingProxyType

from music_factory.models.analysis import Section as S
from music_factory.models.core_type import (
    ArrangementDefaults,
    ChordPattern,
    ChordPatterns,
    CoreTypePattern,
    DensityPattern,
    LyricsDesignDefaults,
    TempoRange,
)

log = logging.getLogger(__name__)

DEFAULT_CORE_TYPE = "yorushika"

_PATTERNS: tuple[CoreTypePattern, ...] = (
    CoreTypePattern(
        name="yorushika",
        description="ヨルシカ風の文学的なJ-Rock/Alternative Pop",
        genre_tags=("J-Rock", "Alternative Pop"),
        default_sections=(
            S.INTRO, S.VERSE1, S.PRE_CHORUS, S.CHORUS, S.POST_CHORUS, S.VERSE2,
            S.PRE_CHORUS, S.CHORUS, S.INSTRUMENTAL, S.BRIDGE, S.FINAL_CHORUS, S.OUTRO,
        ),
        tempo_range=TempoRange(min=80, max=130, typical=95),
        key_mode="major",
        energy_curve="flat",
        chord_patterns=ChordPatterns(
            verse=ChordPattern(feel="stable, gentle", pattern="I - V - vi - IV"),
            prechorus=ChordPattern(feel="slight lift", pattern="IV - V - iii - vi"),
            chorus=ChordPattern(feel="restrained lift", pattern="I - V - IV - I"),
            bridge=ChordPattern(feel="brief contrast", pattern="vi - IV - I - V"),
        ),
        arrangement=ArrangementDefaults(
            center="acoustic guitar",
            rhythm="light",
            bass="minimal",
            density=DensityPattern(verse="low", chorus="medium", final="medium"),
            dynamics="restrained",
            ear_candy="subtle string swells",
        ),
        lyrics_design=LyricsDesignDefaults(
            perspective="first_person",
            scenery="rich",
            emotion_expression="indirect",
            word_density="medium",
            chorus_hook_rule=("repeat_short_phrase", "avoid_direct_emotion_words"),
        ),
        typical_themes=("memory", "time", "distance", "youth", "seasons"),
        typical_keywords=("夏", "空", "風", "光", "余韻", "窓", "夕暮れ"),
    ),
    CoreTypePattern(
        name="illit",
        description="ILLIT風のキュートでミニマルなK-Pop",
        genre_tags=("K-Pop", "Dance Pop"),
        default_sections=(
            S.INTRO, S.VERSE1, S.PRE_CHORUS, S.CHORUS, S.POST_CHORUS, S.VERSE2,
            S.PRE_CHORUS, S.CHORUS, S.POST_CHORUS, S.BRIDGE, S.FINAL_CHORUS,
            S.FINAL_CHORUS_REPEAT, S.OUTRO,
        ),
        tempo_range=TempoRange(min=100, max=130, typical=115),
        key_mode="major",
        energy_curve="wave",
        chord_patterns=ChordPatterns(
            verse=ChordPattern(feel="airy, minimal", pattern="I - V - vi - IV"),
            prechorus=ChordPattern(feel="building tension", pattern="IV - V - vi - I"),
            chorus=ChordPattern(feel="catchy loop", pattern="I - IV - vi - V"),
            bridge=ChordPattern(feel="soft drop", pattern="vi - IV - I - V"),
        ),
        arrangement=ArrangementDefaults(
            center="soft synth pads",
            rhythm="minimal 808",
            bass="soft sub bass",
            density=DensityPattern(verse="low", chorus="medium", final="medium-high"),
            dynamics="consistent groove",
            ear_candy="sparkles, blips, whisper layers",
        ),
        lyrics_design=LyricsDesignDefaults(
            perspective="first_person",
            scenery="minimal",
            emotion_expression="direct but light",
            word_density="low",
            chorus_hook_rule=("ultra_catchy_phrase", "heavy_repetition", "onomatopoeia_welcome"),
        ),
        typical_themes=("crush", "confidence", "playful mood"),
        typical_keywords=("heart", "dream", "shine", "cute", "butterfly"),
    ),
    CoreTypePattern(
        name="yoasobi",
        description="YOASOBI風のストーリーテリングPop",
        genre_tags=("J-Pop", "Electropop"),
        default_sections=(
            S.INTRO, S.VERSE1, S.PRE_CHORUS, S.CHORUS, S.VERSE2, S.PRE_CHORUS,
            S.CHORUS, S.BRIDGE, S.INSTRUMENTAL, S.FINAL_CHORUS,
            S.FINAL_CHORUS_REPEAT, S.OUTRO,
        ),
        tempo_range=TempoRange(min=120, max=180, typical=150),
        key_mode="minor",
        energy_curve="build",
        chord_patterns=ChordPatterns(
            verse=ChordPattern(feel="driving, tense", pattern="i - VI - III - VII"),
            prechorus=ChordPattern(feel="ascending", pattern="iv - V - i - VII"),
            chorus=ChordPattern(feel="explosive release", pattern="i - VII - VI - V"),
            bridge=ChordPattern(feel="dramatic shift", pattern="VI - VII - i - V"),
        ),
        arrangement=ArrangementDefaults(
            center="piano + synth",
            rhythm="driving electronic",
            bass="punchy synth bass",
            density=DensityPattern(verse="medium", chorus="high", final="very high"),
            dynamics="dramatic builds",
            ear_candy="piano runs, synth stabs",
        ),
        lyrics_design=LyricsDesignDefaults(
            perspective="first_person",
            scenery="narrative",
            emotion_expression="dramatic",
            word_density="high",
            chorus_hook_rule=("title_in_hook", "emotional_climax", "fast_syllables"),
        ),
        typical_themes=("story", "fate", "night", "running", "dreams"),
        typical_keywords=("夜", "走る", "光", "明日", "物語", "瞬間"),
    ),
    CoreTypePattern(
        name="aimyon",
        description="あいみょん風の素直なアコースティックPop",
        genre_tags=("J-Pop", "Acoustic Pop"),
        default_sections=(
            S.INTRO, S.VERSE1, S.VERSE2, S.CHORUS, S.VERSE1, S.VERSE2, S.CHORUS,
            S.BRIDGE, S.FINAL_CHORUS, S.OUTRO,
        ),
        tempo_range=TempoRange(min=70, max=110, typical=90),
        key_mode="major",
        energy_curve="flat",
        chord_patterns=ChordPatterns(
            verse=ChordPattern(feel="warm, stable", pattern="I - V - vi - IV"),
            prechorus=ChordPattern(feel="gentle lift", pattern="IV - I - V - vi"),
            chorus=ChordPattern(feel="emotional but grounded", pattern="I - V - IV - I"),
            bridge=ChordPattern(feel="brief reflection", pattern="vi - IV - V - I"),
        ),
        arrangement=ArrangementDefaults(
            center="acoustic guitar",
            rhythm="gentle strumming",
            bass="warm, supportive",
            density=DensityPattern(verse="low", chorus="medium", final="medium"),
            dynamics="understated",
            ear_candy="subtle piano fills",
        ),
        lyrics_design=LyricsDesignDefaults(
            perspective="first_person",
            scenery="minimal",
            emotion_expression="direct, honest",
            word_density="medium",
            chorus_hook_rule=("simple_phrase", "relatable_emotion", "no_excessive_drama"),
        ),
        typical_themes=("love", "everyday life", "nostalgia", "simple happiness"),
        typical_keywords=("君", "愛", "日々", "心", "笑顔", "花"),
    ),
    CoreTypePattern(
        name="gurenka",
        description="紅蓮華風のアニメロック（LiSA系）",
        genre_tags=("Anime Rock", "J-Rock"),
        default_sections=(
            S.INTRO, S.VERSE1, S.PRE_CHORUS, S.CHORUS, S.VERSE2, S.PRE_CHORUS,
            S.CHORUS, S.INSTRUMENTAL, S.BRIDGE, S.FINAL_CHORUS,
            S.FINAL_CHORUS_REPEAT, S.OUTRO,
        ),
        tempo_range=TempoRange(min=140, max=180, typical=160),
        key_mode="minor",
        energy_curve="build",
        chord_patterns=ChordPatterns(
            verse=ChordPattern(feel="tension building", pattern="i - VII - VI - VII"),
            prechorus=ChordPattern(feel="ascending power", pattern="VI - VII - i - V"),
            chorus=ChordPattern(feel="explosive power", pattern="i - VI - III - VII"),
            bridge=ChordPattern(feel="emotional peak", pattern="VI - VII - i"),
        ),
        arrangement=ArrangementDefaults(
            center="distorted guitar",
            rhythm="driving rock drums",
            bass="heavy, aggressive",
            density=DensityPattern(verse="medium", chorus="high", final="very high"),
            dynamics="explosive",
            ear_candy="guitar riffs, drum fills",
        ),
        lyrics_design=LyricsDesignDefaults(
            perspective="first_person",
            scenery="battle/struggle imagery",
            emotion_expression="intense, passionate",
            word_density="high",
            chorus_hook_rule=("powerful_declaration", "title_repetition", "screaming_ok"),
        ),
        typical_themes=("battle", "determination", "fate", "fire", "strength"),
        typical_keywords=("炎", "戦い", "運命", "強さ", "立ち上がる", "心"),
    ),
    CoreTypePattern(
        name="byoushin",
        description="病身（びょうしん）系の鬱ロック・感傷的ボカロ",
        genre_tags=("Vocaloid Rock", "Emo"),
        default_sections=(
            S.INTRO, S.VERSE1, S.VERSE2, S.CHORUS, S.VERSE1, S.VERSE2, S.CHORUS,
            S.INSTRUMENTAL, S.BRIDGE, S.FINAL_CHORUS, S.OUTRO,
        ),
        tempo_range=TempoRange(min=120, max=160, typical=140),
        key_mode="minor",
        energy_curve="wave",
        chord_patterns=ChordPatterns(
            verse=ChordPattern(feel="melancholic loop", pattern="i - VI - III - VII"),
            prechorus=ChordPattern(feel="building despair", pattern="iv - V - i - VII"),
            chorus=ChordPattern(feel="cathartic release", pattern="i - VII - VI - VII"),
            bridge=ChordPattern(feel="introspective", pattern="VI - iv - V - i"),
        ),
        arrangement=ArrangementDefaults(
            center="clean/distorted guitar mix",
            rhythm="syncopated, anxious",
            bass="driving, dark",
            density=DensityPattern(verse="medium", chorus="high", final="high"),
            dynamics="emotional waves",
            ear_candy="glitch effects, reverse sounds",
        ),
        lyrics_design=LyricsDesignDefaults(
            perspective="first_person",
            scenery="internal/abstract",
            emotion_expression="raw, vulnerable",
            word_density="high",
            chorus_hook_rule=("repetitive_phrase", "self_deprecating_ok", "ironic_tone"),
        ),
        typical_themes=("anxiety", "self-doubt", "isolation", "irony", "longing"),
        typical_keywords=("痛い", "消えたい", "嘘", "夜", "涙", "孤独"),
    ),
)

CORE_TYPE_PATTERNS: MappingProxyType[str, CoreTypePattern] = MappingProxyType(
    {pattern.name: pattern for pattern in _PATTERNS}
)


def get_core_type_pattern(core_type: str | None) -> CoreTypePattern:
    """Return the preset for ``core_type``, or the default preset when unknown."""
    pattern = CORE_TYPE_PATTERNS.get(core_type or "")
    if pattern is not None:
        return pattern
    log.debug("Unknown core_type %r, falling back to %s", core_type, DEFAULT_CORE_TYPE)
    return CORE_TYPE_PATTERNS[DEFAULT_CORE_TYPE]


def list_core_types() -> list[str]:
    return list(CORE_TYPE_PATTERNS)


def is_core_type(core_type: str | None) -> bool:
    return core_type in CORE_TYPE_PATTERNS
