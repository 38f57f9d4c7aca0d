from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TargetLength = Literal["3min", "4min", "5min"]
KeyMode = Literal["major", "minor"]
EnergyCurve = Literal["flat", "build", "wave"]
DensityLevel = Literal["sparse", "medium", "dense"]
WordDensity = Literal["low", "medium", "high"]
LyricsLanguage = Literal["ja", "en", "mixed"]


class Section(str, Enum):
    """Structural segment of a song, in the closed vocabulary the generators understand."""

    INTRO = "Intro"
    VERSE1 = "Verse1"
    VERSE2 = "Verse2"
    VERSE3 = "Verse3"
    PRE_CHORUS = "PreChorus"
    CHORUS = "Chorus"
    POST_CHORUS = "PostChorus"
    INSTRUMENTAL = "Instrumental"
    DROP = "Drop"
    BREAKDOWN = "Breakdown"
    BRIDGE = "Bridge"
    FINAL_CHORUS = "FinalChorus"
    FINAL_CHORUS_REPEAT = "FinalChorusRepeat"
    OUTRO = "Outro"


VERSE_SECTIONS = frozenset({Section.VERSE1, Section.VERSE2, Section.VERSE3})
CHORUS_SECTIONS = frozenset(
    {Section.CHORUS, Section.FINAL_CHORUS, Section.FINAL_CHORUS_REPEAT}
)


def normalize_density(value: str | None) -> str | None:
    """Map free-form density wording ("low", "very high", "高密度") onto sparse/medium/dense."""
    if value is None:
        return None
    lower = value.strip().lower()
    if not lower:
        return None
    if any(k in lower for k in ("sparse", "low", "minimal", "低")):
        return "sparse"
    if lower.startswith("medium") and "high" not in lower:
        return "medium"
    if any(k in lower for k in ("dense", "high", "full", "高", "最高")):
        return "dense"
    return "medium"


class SourceSong(BaseModel):
    """Provenance of the reference song."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1, description="Reference song title")
    artist: str | None = Field(default=None, description="Reference artist")


class MusicStructure(BaseModel):
    """Length, tempo, key and section layout."""

    model_config = ConfigDict(frozen=True)

    target_length: TargetLength = Field(default="3min", description="Target song length")
    tempo_bpm: int | float = Field(ge=40, le=300, description="Tempo in BPM")
    key_mode: KeyMode
    energy_curve: EnergyCurve = Field(
        default="flat", description="Overall energy shape of the song"
    )
    sections: list[Section] = Field(
        min_length=1, description="Ordered song sections, order is meaningful"
    )


class ChordSection(BaseModel):
    """Chord feel and functional pattern for one song part."""

    model_config = ConfigDict(frozen=True)

    feel: str | None = None
    pattern: str | None = Field(default=None, description="e.g. 'I - V - vi - IV'")


class ChordProgression(BaseModel):
    model_config = ConfigDict(frozen=True)

    notation: Literal["roman_numerals", "chord_names"] = "roman_numerals"
    verse: ChordSection | None = None
    prechorus: ChordSection | None = None
    chorus: ChordSection | None = None
    bridge: ChordSection | None = None


class Density(BaseModel):
    """Arrangement density per song part."""

    model_config = ConfigDict(frozen=True)

    verse: DensityLevel | None = None
    chorus: DensityLevel | None = None
    final: DensityLevel | None = None

    @field_validator("verse", "chorus", "final", mode="before")
    @classmethod
    def _normalize(cls, value):
        if isinstance(value, str):
            return normalize_density(value)
        return value


class Arrangement(BaseModel):
    """Genre, instrumentation and production choices."""

    model_config = ConfigDict(frozen=True)

    genre_tags: list[str] = Field(min_length=1, max_length=4, description="1 to 4 genre tags")
    mood: list[str] | None = None
    center: str | None = Field(default=None, description="Main instrument the arrangement centres on")
    instruments: list[str] | None = None
    rhythm: str | None = None
    bass: str | None = None
    density: Density | None = None
    dynamics: str | None = None
    ear_candy: str | None = None
    texture: str | None = None


class ChorusHookRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    repeat_short_phrase: bool | None = None
    avoid_direct_emotion_words: bool | None = None


class VocalStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    gender: str | None = None
    range: str | None = None
    character: list[str] | None = None
    techniques: list[str] | None = None


class LyricsDesign(BaseModel):
    """How the lyrics should be written."""

    model_config = ConfigDict(frozen=True)

    language: LyricsLanguage
    perspective: str | None = None
    scenery: str | None = None
    emotion_expression: str | None = None
    word_density: WordDensity | None = None
    theme: list[str] | None = None
    chorus_hook_rule: ChorusHookRule | None = None
    vocal_style: VocalStyle | None = None

    @field_validator("word_density", mode="before")
    @classmethod
    def _normalize_word_density(cls, value):
        if isinstance(value, str):
            lower = value.strip().lower()
            if "high" in lower or "高" in lower:
                return "high"
            if "low" in lower or "低" in lower:
                return "low"
            return "medium" if lower else None
        return value


class Analysis(BaseModel):
    """Canonical song brief consumed by every generator."""

    source_song: SourceSong
    core_type: str | None = None
    music_structure: MusicStructure
    chord_progression: ChordProgression | None = None
    arrangement: Arrangement
    lyrics_design: LyricsDesign
    concept_keywords: list[str] | None = None

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "source_song": {"title": "ただ君に晴れ", "artist": "ヨルシカ"},
                "core_type": "yorushika",
                "music_structure": {
                    "target_length": "3min",
                    "tempo_bpm": 95,
                    "key_mode": "major",
                    "energy_curve": "flat",
                    "sections": ["Intro", "Verse1", "PreChorus", "Chorus", "Outro"],
                },
                "chord_progression": {
                    "notation": "roman_numerals",
                    "verse": {"feel": "stable, gentle", "pattern": "I - V - vi - IV"},
                    "chorus": {"feel": "restrained lift", "pattern": "I - V - IV - I"},
                },
                "arrangement": {
                    "genre_tags": ["J-Rock", "Alternative Pop"],
                    "center": "acoustic guitar",
                    "density": {"verse": "sparse", "chorus": "medium", "final": "medium"},
                    "dynamics": "restrained",
                },
                "lyrics_design": {
                    "language": "ja",
                    "perspective": "first_person",
                    "word_density": "medium",
                    "theme": ["memory", "seasons"],
                    "chorus_hook_rule": {
                        "repeat_short_phrase": True,
                        "avoid_direct_emotion_words": True,
                    },
                },
                "concept_keywords": ["夏", "余韻"],
            }
        },
    )
