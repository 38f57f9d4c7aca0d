"""Parse a song-analysis markdown document into a ParsedAnalysis.

The document layout is frontmatter followed by ``##`` sections, with bold
key/value bullets, numbered lists, one pipe table and ``###`` sub-sections.
Headers may be written in English or Japanese. Each pass below is a plain
function over text so it can be used and tested on its own; none of them
raise on malformed content.
"""

from __future__ import annotations

import re

from music_factory.models.parsed_analysis import (
    InstrumentEntry,
    ParsedAnalysis,
    ParsedArrangement,
    ParsedChordProgression,
    ParsedChordSection,
    ParsedDensity,
    ParsedLyricsDesign,
    ParsedStructure,
    ParseValidation,
)

_FRONTMATTER_RE = re.compile(r"\A---\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_H2_RE = re.compile(r"^## ", re.MULTILINE)
_H3_RE = re.compile(r"^### ", re.MULTILINE)
_PAREN_NOTE_RE = re.compile(r"（.*?）|\(.*?\)")
_BULLET_RE = re.compile(r"^[-*]\s+(.+)")
_NUMBERED_RE = re.compile(r"^\d+\.\s+(.+)")
_KV_BULLET_RE = re.compile(r"^[-*]\s+\*\*(.+?)(?:\*\*\s*[:：]|[:：]\*\*)\s*(.+)")
_TABLE_SEPARATOR_RE = re.compile(r"^\|[\s:|-]+\|$")
_DENSITY_BLOCK_RE = re.compile(
    r"^### (?:密度設計|Density Design).*?(?=^###|\Z)", re.MULTILINE | re.DOTALL
)
_AFTER_COLON_RE = re.compile(r"[:：]\s*(.+)")
_KEYWORD_SPLIT_RE = re.compile(r"[,、]\s*|\s{2,}")
_GENRE_SPLIT_RE = re.compile(r"\s*[×,、]\s*|\s+[xX]\s+")
_THEME_SPLIT_RE = re.compile(r"[、,]")

ESSENCE_HEADERS = ("曲の本質", "Essence")
STRUCTURE_HEADERS = ("Music Structure", "曲展開")
HARMONY_HEADERS = ("Harmony / Chord Progression", "Harmony", "コード進行")
ARRANGEMENT_HEADERS = ("Arrangement", "アレンジ")
LYRICS_HEADERS = ("Lyrics Design", "歌詞設計")
DESIGN_POINTS_HEADERS = ("設計のポイント", "Design Points")
KEYWORDS_HEADERS = ("概念キーワード", "Concept Keywords")


def _lines(text: str) -> list[str]:
    return text.splitlines()


def _first(mapping: dict[str, str], *keys: str, default: str = "") -> str:
    for key in keys:
        value = mapping.get(key)
        if value:
            return value
    return default


def extract_frontmatter(markdown: str) -> dict[str, str]:
    """Flat ``key: value`` pairs from a leading ``---`` block."""
    match = _FRONTMATTER_RE.match(markdown)
    if not match:
        return {}

    frontmatter: dict[str, str] = {}
    for line in _lines(match.group(1)):
        key, sep, value = line.partition(":")
        if sep and key.strip():
            frontmatter[key.strip()] = value.strip().strip("\"'")
    return frontmatter


def strip_frontmatter(markdown: str) -> str:
    return _FRONTMATTER_RE.sub("", markdown, count=1)


def split_into_sections(markdown: str) -> dict[str, str]:
    """Map each ``##`` header (parenthetical notes removed) to its body."""
    sections: dict[str, str] = {}
    chunks = _H2_RE.split(strip_frontmatter(markdown))
    # chunks[0] is whatever precedes the first header
    for chunk in chunks[1:]:
        header, _, body = chunk.partition("\n")
        name = _PAREN_NOTE_RE.sub("", header).strip()
        if name:
            sections[name] = body.strip()
    return sections


def parse_bullet_points(text: str) -> list[str]:
    points = []
    for line in _lines(text):
        match = _BULLET_RE.match(line)
        if match:
            points.append(match.group(1).strip())
    return points


def parse_numbered_list(text: str) -> list[str]:
    items = []
    for line in _lines(text):
        match = _NUMBERED_RE.match(line)
        if match:
            items.append(match.group(1).strip())
    return items


def parse_key_value_bullets(text: str) -> dict[str, str]:
    """``- **Key**: value`` bullets as a dict."""
    result: dict[str, str] = {}
    for line in _lines(text):
        match = _KV_BULLET_RE.match(line)
        if match:
            result[match.group(1).strip()] = match.group(2).strip()
    return result


def extract_bold_value(text: str, key: str) -> str | None:
    match = re.search(rf"\*\*{re.escape(key)}\*\*\s*[:：]\s*(.+)", text, re.IGNORECASE)
    return match.group(1).strip() if match else None


def parse_instrument_table(text: str) -> list[InstrumentEntry]:
    """Rows of the first pipe table whose header mentions パート or Part."""
    instruments: list[InstrumentEntry] = []
    in_table = False
    header_passed = False

    for raw in _lines(text):
        line = raw.strip()
        if not in_table:
            if "|" in line and ("パート" in line or "Part" in line):
                in_table = True
            continue
        if not line.startswith("|"):
            if header_passed:
                break
            continue
        if _TABLE_SEPARATOR_RE.match(line):
            header_passed = True
            continue
        if not header_passed:
            continue

        cells = [cell.strip() for cell in line.split("|")]
        cells = [cell for cell in cells if cell]
        if len(cells) >= 3:
            instruments.append(InstrumentEntry(part=cells[0], instrument=cells[1], role=cells[2]))

    return instruments


def parse_chord_sections(text: str) -> dict[str, ParsedChordSection]:
    """Chord detail per ``###`` sub-section, keyed by lower-cased header."""
    sections: dict[str, ParsedChordSection] = {}
    for chunk in _H3_RE.split(text)[1:]:
        header, _, body = chunk.partition("\n")
        name = header.strip().lower()
        if not name:
            continue
        kv = parse_key_value_bullets(body)
        sections[name] = ParsedChordSection(
            pattern=_first(kv, "パターン", "Pattern"),
            feel=_first(kv, "雰囲気", "Feel"),
            design_intent=_first(kv, "設計意図", "Design Intent") or None,
        )
    return sections


def parse_density(text: str) -> ParsedDensity | None:
    """Density per part from a ``### 密度設計`` / ``### Density Design`` block.

    Returns None when ``text`` holds no such block.
    """
    block = _DENSITY_BLOCK_RE.search(text)
    if not block:
        return None

    values: dict[str, str] = {}
    for line in _lines(block.group(0))[1:]:
        match = _AFTER_COLON_RE.search(line)
        if not match:
            continue
        value = match.group(1).strip()
        lower = line.lower()
        if "final" in lower or "大サビ" in line:
            values["final_chorus"] = value
        elif "drop" in lower or "ドロップ" in line:
            values["drop"] = value
        elif ("chorus" in lower and "pre" not in lower) or ("サビ" in line):
            values["chorus"] = value
        elif "verse" in lower or "aメロ" in lower:
            values["verse"] = value
    return ParsedDensity(**values)


def detect_key_mode(text: str) -> str:
    lower = text.lower()
    if "minor" in lower or "マイナー" in text or "短調" in text:
        return "minor"
    return "major"


def detect_language(text: str) -> str:
    lower = text.lower()
    if "mixed" in lower or "ミックス" in text or "混在" in text:
        return "mixed"
    if "english" in lower or "英語" in text or lower.strip() == "en":
        return "en"
    return "ja"


def parse_keywords(text: str) -> list[str]:
    """Keywords separated by commas, 、 or wide spacing, one or many bullet lines."""
    keywords: list[str] = []
    for line in _lines(text):
        cleaned = re.sub(r"^[-*]\s*", "", line.strip())
        keywords.extend(k.strip() for k in _KEYWORD_SPLIT_RE.split(cleaned) if k.strip())
    return keywords


def parse_genre_tags(text: str) -> list[str]:
    return [tag.strip() for tag in _GENRE_SPLIT_RE.split(text) if tag.strip()]


def parse_analysis_markdown(markdown: str) -> ParsedAnalysis:
    frontmatter = extract_frontmatter(markdown)
    sections = split_into_sections(markdown)

    essence = parse_bullet_points(_first(sections, *ESSENCE_HEADERS))

    structure_text = _first(sections, *STRUCTURE_HEADERS)
    structure_kv = parse_key_value_bullets(structure_text)
    structure = ParsedStructure(
        target_length=_first(structure_kv, "Target Length", "目標尺")
        or extract_bold_value(structure_text, "Target Length")
        or "~3:00",
        energy_curve=_first(structure_kv, "Energy Curve", "エネルギー曲線")
        or extract_bold_value(structure_text, "Energy Curve")
        or "build",
        tempo=_first(structure_kv, "Tempo", "BPM", "テンポ") or None,
        sections=parse_numbered_list(structure_text),
        design_intent=_first(structure_kv, "設計意図", "Design Intent"),
    )

    harmony_text = _first(sections, *HARMONY_HEADERS)
    key_text = extract_bold_value(harmony_text, "Key") or ""
    chord_progression = ParsedChordProgression(
        key=re.sub(r"\s*\(.*\)", "", key_text).strip(),
        key_mode=detect_key_mode(key_text),
        sections=parse_chord_sections(harmony_text),
    )

    arrangement_text = _first(sections, *ARRANGEMENT_HEADERS)
    arrangement_kv = parse_key_value_bullets(arrangement_text)
    density = parse_density(arrangement_text) or ParsedDensity(
        verse=_first(arrangement_kv, "Verse", default="medium"),
        chorus=_first(arrangement_kv, "Chorus", default="high"),
        final_chorus=_first(arrangement_kv, "Final Chorus", default="very high"),
    )
    arrangement = ParsedArrangement(
        genre_tags=parse_genre_tags(_first(arrangement_kv, "ジャンル", "Genre")),
        characteristics=[
            point
            for point in parse_bullet_points(arrangement_text)
            if not point.startswith(("ジャンル", "Genre", "**ジャンル", "**Genre")) and "|" not in point
        ],
        design=_first(arrangement_kv, "設計", "Design"),
        instruments=parse_instrument_table(arrangement_text),
        density=density,
    )

    lyrics_kv = parse_key_value_bullets(_first(sections, *LYRICS_HEADERS))
    lyrics_design = ParsedLyricsDesign(
        language=detect_language(_first(lyrics_kv, "言語", "Language", default="ja")),
        perspective=_first(lyrics_kv, "視点", "Perspective"),
        themes=[
            t.strip()
            for t in _THEME_SPLIT_RE.split(_first(lyrics_kv, "主題", "Themes", "Theme"))
            if t.strip()
        ],
        word_density=_first(lyrics_kv, "言語密度", "Word Density", default="medium"),
        expression_style=_first(lyrics_kv, "断定表現", "Expression Style"),
        emotion_handling=_first(lyrics_kv, "感情", "Emotion"),
    )

    return ParsedAnalysis(
        title=frontmatter.get("title", ""),
        artist=frontmatter.get("artist", ""),
        analyzed_at=frontmatter.get("analyzed_at"),
        essence=essence,
        structure=structure,
        chord_progression=chord_progression,
        arrangement=arrangement,
        lyrics_design=lyrics_design,
        design_points=parse_bullet_points(_first(sections, *DESIGN_POINTS_HEADERS)),
        concept_keywords=parse_keywords(_first(sections, *KEYWORDS_HEADERS)),
    )


def validate_parsed_analysis(parsed: ParsedAnalysis) -> ParseValidation:
    errors = []
    if not parsed.title:
        errors.append("title is required in frontmatter")
    if not parsed.artist:
        errors.append("artist is required in frontmatter")
    if not parsed.structure.sections:
        errors.append("at least one section is required in Music Structure")
    return ParseValidation(valid=not errors, errors=errors)
