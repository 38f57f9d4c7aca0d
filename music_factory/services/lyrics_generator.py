"""Lyrics direction sheet: section markers, control tags and writing guidance.

The sheet is not a lyric. It is a scaffold that tells the writer (or Suno)
what each section should do, with ``TODO`` placeholders where lines go.
Only section markers are bracketed so :func:`extract_sections` can recover
the structure from the text.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Literal, Sequence

from music_factory.models.analysis import CHORUS_SECTIONS, VERSE_SECTIONS, Analysis
from music_factory.models.analysis import Section as S
from music_factory.services.sections import display_name, resolve_sections
from music_factory.services.translations import translate_array, translate_to_english

log = logging.getLogger(__name__)

REQUIRED_SECTIONS: tuple[str, ...] = (
    "Verse 1",
    "Verse 2",
    "Chorus",
    "Instrumental",
    "Bridge",
    "Final Chorus",
)

VerseRole = Literal["setup", "development", "climax"]

_MARKER_RE = re.compile(r"\[([^\]]+)\]")

LINES_PER_WORD_DENSITY = MappingProxyType({"low": 3, "medium": 4, "high": 6})

# Sections that carry no sung lines.
_INSTRUMENTAL_ONLY = frozenset({S.INTRO, S.INSTRUMENTAL, S.DROP})
_SHORT_SECTIONS = frozenset({S.POST_CHORUS, S.BREAKDOWN, S.OUTRO})
_CLIMAX_CHORUSES = CHORUS_SECTIONS - {S.CHORUS}

CONTROL_TAGS: MappingProxyType[S, tuple[str, ...]] = MappingProxyType(
    {
        S.INTRO: ("(instrumental intro)",),
        S.VERSE1: ("(softly)",),
        S.VERSE2: ("(with more emotion)",),
        S.VERSE3: ("(intensifying)",),
        S.PRE_CHORUS: ("(building up)",),
        S.CHORUS: ("(powerfully)",),
        S.POST_CHORUS: ("(lingering)",),
        S.INSTRUMENTAL: ("(instrumental break)",),
        S.DROP: ("(beat drop)",),
        S.BREAKDOWN: ("(stripped down)",),
        S.BRIDGE: ("(emotional shift)",),
        S.FINAL_CHORUS: ("(powerfully)", "(climax)"),
        S.FINAL_CHORUS_REPEAT: ("(full energy)", "(repeat hook)"),
        S.OUTRO: ("(fading out)",),
    }
)
FIRST_CHORUS_TAG = "(energy peak)"

GUIDANCE_JA: MappingProxyType[S, str] = MappingProxyType(
    {
        S.INTRO: "楽器のみ。曲の世界観を提示する",
        S.VERSE1: "Aメロ。情景と主人公を具体的に描く",
        S.VERSE2: "Aメロ2。1番から時間か視点を少し動かす",
        S.VERSE3: "Aメロ3。物語を終盤へ運ぶ",
        S.PRE_CHORUS: "Bメロ。サビへの期待感を高める",
        S.CHORUS: "サビ。曲の核となるフレーズを置く",
        S.POST_CHORUS: "サビの余韻。短いフレーズやハミング",
        S.INSTRUMENTAL: "間奏。楽器ソロで感情をつなぐ",
        S.DROP: "ドロップ。ビートとリフで盛り上げる",
        S.BREAKDOWN: "ブレイクダウン。音数を減らし言葉を際立たせる",
        S.BRIDGE: "ブリッジ。視点か感情を転換する",
        S.FINAL_CHORUS: "大サビ。フックを最大の熱量で歌う",
        S.FINAL_CHORUS_REPEAT: "大サビの繰り返し。フックを重ねて締める",
        S.OUTRO: "アウトロ。余韻を残して終える",
    }
)

GUIDANCE_EN: MappingProxyType[S, str] = MappingProxyType(
    {
        S.INTRO: "Instrumental only. Set up the world of the song.",
        S.VERSE1: "Paint the scene and introduce the narrator.",
        S.VERSE2: "Move time or perspective forward from the first verse.",
        S.VERSE3: "Carry the story toward its ending.",
        S.PRE_CHORUS: "Build anticipation for the chorus.",
        S.CHORUS: "State the central hook of the song.",
        S.POST_CHORUS: "Echo the chorus with a short phrase or humming.",
        S.INSTRUMENTAL: "Instrumental solo that carries the emotion.",
        S.DROP: "Beat and riff take over.",
        S.BREAKDOWN: "Strip the arrangement back and let the words stand out.",
        S.BRIDGE: "Shift perspective or emotion.",
        S.FINAL_CHORUS: "Deliver the hook at full intensity.",
        S.FINAL_CHORUS_REPEAT: "Repeat the hook and close the peak.",
        S.OUTRO: "End with a lingering afterglow.",
    }
)

EXAMPLES_JA: MappingProxyType[S, str] = MappingProxyType(
    {
        S.INTRO: "(楽器のみ)",
        S.VERSE1: "窓辺に落ちた光が 昨日の色をしていた",
        S.VERSE2: "あの日と同じ道を 今は一人で歩く",
        S.VERSE3: "季節が巡っても 消えない足跡がある",
        S.PRE_CHORUS: "言えなかった言葉が 胸の奥で鳴る",
        S.CHORUS: "まだ 君を まだ 探してる",
        S.POST_CHORUS: "ラララ 風の中",
        S.INSTRUMENTAL: "(楽器ソロ)",
        S.DROP: "(ビートのみ)",
        S.BREAKDOWN: "静かな夜に ひとつだけ",
        S.BRIDGE: "もしも あの日に戻れたなら",
        S.FINAL_CHORUS: "まだ 君を まだ 探してる 今も",
        S.FINAL_CHORUS_REPEAT: "まだ 君を まだ",
        S.OUTRO: "光の中へ",
    }
)

_VERSE_ROLE_JA = MappingProxyType(
    {
        "setup": "導入: 主人公と状況を提示する",
        "development": "展開: 感情や状況を一歩進める",
        "climax": "頂点: 物語の核心に触れる",
    }
)
_VERSE_ROLE_EN = MappingProxyType(
    {
        "setup": "Setup: introduce the narrator and the situation.",
        "development": "Development: push the feeling or situation one step further.",
        "climax": "Climax: reach the heart of the story.",
    }
)

_HOOK_REPEAT_JA = "短いフレーズを繰り返してフックにする"
_HOOK_REPEAT_EN = "Repeat a short phrase as the hook."
_HOOK_AVOID_JA = "直接的な感情語(悲しい、嬉しい等)を避け、情景で表現する"
_HOOK_AVOID_EN = "Avoid direct emotion words; show feelings through imagery."
_CLIMAX_JA = "曲のクライマックス。感情を最も高める"
_CLIMAX_EN = "Climax of the song: the emotional peak."
_FIRST_CHORUS_JA = "最初のサビ。ここで一度エネルギーを爆発させる"
_FIRST_CHORUS_EN = "First chorus: the first release of energy."

_LANGUAGE_LABELS = {"ja": "Japanese", "en": "English", "mixed": "Mixed (Japanese / English)"}


def _sanitize(text: str) -> str:
    """Replace square brackets so user text never looks like a section marker."""
    return text.replace("[", "(").replace("]", ")")


def verse_roles(sections: Sequence[S]) -> list[VerseRole]:
    """Structural role of each verse, in the order verses appear."""
    total = sum(1 for s in sections if s in VERSE_SECTIONS)
    roles: list[VerseRole] = []
    for index in range(total):
        if index == 0:
            roles.append("setup")
        elif index == total - 1 and total >= 3:
            roles.append("climax")
        else:
            roles.append("development")
    return roles


def target_line_count(section: S, word_density: str | None) -> int:
    """How many lyric lines a section should hold, 0 for instrumental sections."""
    if section in _INSTRUMENTAL_ONLY:
        return 0
    base = LINES_PER_WORD_DENSITY.get(word_density or "medium", 4)
    if section == S.PRE_CHORUS:
        return max(2, base - 1)
    if section in _SHORT_SECTIONS:
        return 2
    return base


def _header(analysis: Analysis) -> list[str]:
    lyrics = analysis.lyrics_design
    density = lyrics.word_density or "medium"
    lines = [
        f"# Lyrics direction: {analysis.source_song.title}",
        f"# Language: {_LANGUAGE_LABELS[lyrics.language]}",
    ]
    if lyrics.perspective:
        perspective = translate_to_english(lyrics.perspective).replace("_", " ")
        lines.append(f"# Perspective: {perspective}")
    if lyrics.theme:
        lines.append(f"# Themes: {', '.join(translate_array(lyrics.theme))}")
    lines.append(
        f"# Word density: {density} (about {LINES_PER_WORD_DENSITY[density]} lines per verse)"
    )
    vocal = lyrics.vocal_style
    if vocal is not None:
        parts = [vocal.gender, vocal.range, *(vocal.character or ()), *(vocal.techniques or ())]
        described = ", ".join(translate_to_english(p) for p in parts if p)
        if described:
            lines.append(f"# Vocal style: {described}")
    return [_sanitize(line) for line in lines]


def _section_block(
    analysis: Analysis,
    section: S,
    *,
    first_chorus: bool,
    verse_role: VerseRole | None,
) -> list[str]:
    lyrics = analysis.lyrics_design
    japanese = lyrics.language == "ja"
    hook = lyrics.chorus_hook_rule

    lines = [f"[{display_name(section)}]", *CONTROL_TAGS[section]]
    if first_chorus:
        lines.append(FIRST_CHORUS_TAG)

    guidance = [GUIDANCE_JA[section] if japanese else GUIDANCE_EN[section]]
    if verse_role is not None:
        guidance.append((_VERSE_ROLE_JA if japanese else _VERSE_ROLE_EN)[verse_role])
        if lyrics.theme:
            themes = ", ".join(lyrics.theme if japanese else translate_array(lyrics.theme))
            guidance.append(
                f"テーマ「{themes}」を具体的な情景で描く"
                if japanese
                else f"Explore {themes} through concrete images."
            )

    if section in CHORUS_SECTIONS:
        if first_chorus:
            guidance.append(_FIRST_CHORUS_JA if japanese else _FIRST_CHORUS_EN)
        if hook is not None and hook.repeat_short_phrase:
            guidance.append(_HOOK_REPEAT_JA if japanese else _HOOK_REPEAT_EN)
        if hook is not None and hook.avoid_direct_emotion_words:
            guidance.append(_HOOK_AVOID_JA if japanese else _HOOK_AVOID_EN)
        if section in _CLIMAX_CHORUSES:
            guidance.append(_CLIMAX_JA if japanese else _CLIMAX_EN)

    lines.extend(f"# {_sanitize(text)}" for text in guidance)
    if japanese:
        lines.append(f"# 例: {EXAMPLES_JA[section]}")

    count = target_line_count(section, lyrics.word_density)
    if count:
        lines.append(f"TODO: write {count} lines")
    return lines


def generate_lyrics(analysis: Analysis) -> str:
    """Render the lyrics direction sheet for ``analysis``."""
    structure = analysis.music_structure
    sections = resolve_sections(structure.sections, structure.target_length)
    roles = iter(verse_roles(sections))

    lines = _header(analysis)
    lines.append("")

    seen_chorus = False
    for section in sections:
        first_chorus = section == S.CHORUS and not seen_chorus
        seen_chorus = seen_chorus or section == S.CHORUS
        role = next(roles) if section in VERSE_SECTIONS else None
        lines.extend(
            _section_block(analysis, section, first_chorus=first_chorus, verse_role=role)
        )
        lines.append("")

    log.debug("Generated lyrics sheet with %d sections", len(sections))
    return "\n".join(lines).strip()


def extract_sections(lyrics: str) -> list[str]:
    """Return the text inside every ``[...]`` marker, in order."""
    return [match for match in _MARKER_RE.findall(lyrics) if match]


def has_required_sections(
    lyrics: str, required: Sequence[str] = REQUIRED_SECTIONS
) -> bool:
    found = extract_sections(lyrics)
    return all(any(name in marker for marker in found) for name in required)


def count_sections(lyrics: str) -> int:
    return len(extract_sections(lyrics))
