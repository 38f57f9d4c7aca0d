from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from music_factory.models.analysis import EnergyCurve, Section


class TempoRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: int
    max: int
    typical: int


class ChordPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    feel: str
    pattern: str = Field(description="Roman numeral notation")


class ChordPatterns(BaseModel):
    model_config = ConfigDict(frozen=True)

    verse: ChordPattern
    prechorus: ChordPattern
    chorus: ChordPattern
    bridge: ChordPattern


class DensityPattern(BaseModel):
    model_config = ConfigDict(frozen=True)

    verse: str
    chorus: str
    final: str


class ArrangementDefaults(BaseModel):
    model_config = ConfigDict(frozen=True)

    center: str
    rhythm: str
    bass: str
    density: DensityPattern
    dynamics: str
    ear_candy: str


class LyricsDesignDefaults(BaseModel):
    model_config = ConfigDict(frozen=True)

    perspective: str
    scenery: str
    emotion_expression: str
    word_density: str
    chorus_hook_rule: tuple[str, ...] = ()


class CoreTypePattern(BaseModel):
    """Immutable style preset abstracted from an artist or sub-genre."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    genre_tags: tuple[str, ...] = Field(description="Default genre tags used at synthesis time")
    default_sections: tuple[Section, ...]
    tempo_range: TempoRange
    key_mode: Literal["major", "minor", "both"]
    energy_curve: EnergyCurve
    chord_patterns: ChordPatterns
    arrangement: ArrangementDefaults
    lyrics_design: LyricsDesignDefaults
    typical_themes: tuple[str, ...] = ()
    typical_keywords: tuple[str, ...] = ()
