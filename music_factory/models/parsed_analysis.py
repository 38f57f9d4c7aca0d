from typing import Literal

from pydantic import BaseModel, Field


class InstrumentEntry(BaseModel):
    """One row of the arrangement instrument table."""
    part: str
    instrument: str
    role: str


class ParsedChordSection(BaseModel):
    pattern: str = ""
    feel: str = ""
    design_intent: str | None = None


class ParsedStructure(BaseModel):
    target_length: str = Field(default="~3:00", description="Free-form length, e.g. '~3:30'")
    energy_curve: str = "build"
    tempo: str | None = Field(default=None, description="Tempo or BPM entry as written")
    sections: list[str] = Field(default_factory=list, description="Numbered section list, as written")
    design_intent: str = ""


class ParsedChordProgression(BaseModel):
    key: str = ""
    key_mode: Literal["major", "minor"] = "major"
    sections: dict[str, ParsedChordSection] = Field(
        default_factory=dict, description="Chord detail keyed by lower-cased ### header"
    )


class ParsedDensity(BaseModel):
    verse: str = "medium"
    chorus: str = "high"
    drop: str | None = None
    final_chorus: str = "very high"


class ParsedArrangement(BaseModel):
    genre_tags: list[str] = Field(default_factory=list)
    characteristics: list[str] = Field(default_factory=list)
    design: str = ""
    instruments: list[InstrumentEntry] = Field(default_factory=list)
    density: ParsedDensity = Field(default_factory=ParsedDensity)


class ParsedLyricsDesign(BaseModel):
    language: Literal["ja", "en", "mixed"] = "ja"
    perspective: str = ""
    themes: list[str] = Field(default_factory=list)
    word_density: str = "medium"
    expression_style: str = ""
    emotion_handling: str = ""


class ParsedAnalysis(BaseModel):
    """Loose structure recovered from an analysis markdown document.

    Every field has a default so a partially written document still parses;
    use ``validate_parsed_analysis`` to check the required minimum.
    """
    title: str = ""
    artist: str = ""
    analyzed_at: str | None = None
    essence: list[str] = Field(default_factory=list)
    structure: ParsedStructure = Field(default_factory=ParsedStructure)
    chord_progression: ParsedChordProgression = Field(default_factory=ParsedChordProgression)
    arrangement: ParsedArrangement = Field(default_factory=ParsedArrangement)
    lyrics_design: ParsedLyricsDesign = Field(default_factory=ParsedLyricsDesign)
    design_points: list[str] = Field(default_factory=list)
    concept_keywords: list[str] = Field(default_factory=list)


class ParseValidation(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
