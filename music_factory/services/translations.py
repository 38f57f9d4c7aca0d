"""Japanese → English term translation for Suno-facing text.

Suno responds best to English prompts, so every free-text field that may hold
Japanese is passed through :func:`translate_to_english` before it is rendered.
Translation is table driven and best effort: words missing from the tables
pass through unchanged.
"""

from __future__ import annotations

import re
from types import MappingProxyType

_JAPANESE_RE = re.compile(r"[\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]")

# Idiomatic phrases whose word-by-word rendering would read wrong.
PHRASE_OVERRIDES = MappingProxyType(
    {
        "軽快なのに切迫感がある": "lively yet urgent",
        "ポップだが少しメランコリックなマイナー感": "pop with a melancholic minor feel",
        "命の瀬戸際にいる人への呼びかけ": "calling out to someone on the edge",
        "追いかける焦燥": "desperate chase",
        "焦燥、切なさ、届かない苦しさ": "anxiety, longing, unreachable anguish",
        "焦燥, 切なさ, 届かない苦しさ": "anxiety, longing, unreachable anguish",
        "光と影": "light and shadow",
        "一人称": "first person",
        "二人称": "second person",
        "三人称": "third person",
    }
)

MUSIC_TERMS = MappingProxyType(
    {
        # instruments
        "ピアノ": "piano",
        "シンセ": "synth",
        "ギター": "guitar",
        "アコギ": "acoustic guitar",
        "アコースティックギター": "acoustic guitar",
        "エレキ": "electric guitar",
        "ベース": "bass",
        "ドラム": "drums",
        "ストリングス": "strings",
        "オーケストラ": "orchestra",
        "ブラス": "brass",
        "808ベース": "808 bass",
        "打ち込み": "programmed",
        "生": "live",
        "シンセベース": "synth bass",
        "シンセアルペジオ": "synth arpeggio",
        "シンセパッド": "synth pad",
        "パッド": "pad",
        # effects and techniques
        "ボーカルチョップ": "vocal chop",
        "シンセスタブ": "synth stab",
        "グリッチ": "glitch",
        "リバーブ": "reverb",
        "ディレイ": "delay",
        "フィルター": "filter",
        "サイドチェイン": "sidechain",
        "ハイハット": "hi-hat",
        "キック": "kick",
        "スネア": "snare",
        "アルペジオ": "arpeggio",
        "ファルセット": "falsetto",
        "ウィスパー": "whisper",
        "ハモリ": "harmony",
        # structure
        "サビ": "chorus",
        "大サビ": "final chorus",
        "Aメロ": "verse",
        "Bメロ": "pre-chorus",
        "バース": "verse",
        "ブリッジ": "bridge",
        "間奏": "instrumental break",
        "イントロ": "intro",
        "アウトロ": "outro",
        "ドロップ": "drop",
        "ビルドアップ": "buildup",
        "短尺": "short form",
        "長尺": "long form",
        "ループ": "loop",
        "リピート": "repeat",
        # dynamics and mood
        "軽快": "lively",
        "切迫感": "urgency",
        "疾走感": "driving energy",
        "爆発": "explosive",
        "解決": "resolution",
        "不安定": "unstable",
        "安定": "stable",
        "上昇": "ascending",
        "下降": "descending",
        "期待": "anticipation",
        "違和感": "unease",
        "開放": "release",
        "緊張": "tension",
        "高密度": "dense",
        "低密度": "sparse",
        "中密度": "medium density",
        "静寂": "silence",
        "覚悟": "determination",
        "メランコリック": "melancholic",
        "ポップ": "pop",
        "明るい": "bright",
        "暗い": "dark",
        "切ない": "bittersweet",
        "熱い": "passionate",
        "冷たい": "cold",
        "穏やか": "calm",
        "激しい": "intense",
        "優しい": "gentle",
        "力強い": "powerful",
        "儚い": "fragile",
        # emotion
        "語る": "narrate",
        "救う": "save",
        "救わない": "without salvation",
        "宣言": "declaration",
        "執着": "obsession",
        "焦燥": "anxiety",
        "切なさ": "longing",
        "届かない": "unreachable",
        "苦しさ": "anguish",
        "涙": "tears",
        "痛い": "painful",
        "消えたい": "wanting to disappear",
        # concept keywords
        "完璧": "perfection",
        "嘘": "lies",
        "愛されたい": "desire to be loved",
        "虚構": "illusion",
        "演技": "performance",
        "光": "light",
        "影": "shadow",
        "光と影": "light and shadow",
        "孤独": "solitude",
        "仮面": "mask",
        "本音": "true feelings",
        "夜": "night",
        "夏": "summer",
        "空": "sky",
        "風": "wind",
        "窓": "window",
        "夕暮れ": "dusk",
        "余韻": "lingering afterglow",
        "走る": "running",
        "明日": "tomorrow",
        "物語": "story",
        "瞬間": "moment",
        "君": "you",
        "愛": "love",
        "日々": "days",
        "心": "heart",
        "笑顔": "smile",
        "花": "flowers",
        "炎": "flames",
        "戦い": "battle",
        "運命": "fate",
        "強さ": "strength",
        "立ち上がる": "rising up",
        "記憶": "memory",
        "別れ": "farewell",
        "恋": "love",
        "駆ける": "running",
        "追いかける": "chasing",
        "手を伸ばす": "reaching out",
        "希望": "hope",
        "絶望": "despair",
        "命": "life",
        "瀬戸際": "edge",
        "呼びかけ": "calling out",
        # perspective and scenery
        "一人称": "first person",
        "二人称": "second person",
        "三人称": "third person",
        "視点": "perspective",
        "主人公": "protagonist",
        "情景": "scenery",
        "描写": "depiction",
        "豊か": "rich",
        "一瞬の": "momentary",
        "内面": "inner world",
    }
)

# Longest key first so compound terms win over their substrings.
_SORTED_TERMS: tuple[tuple[str, str], ...] = tuple(
    sorted(MUSIC_TERMS.items(), key=lambda item: len(item[0]), reverse=True)
)

_CLEANUPS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\s*\+\s*"), " + "),
    (re.compile(r"\s*（"), " ("),
    (re.compile(r"）\s*"), ") "),
    (re.compile(r"\s*、\s*"), ", "),
    (re.compile(r"。"), ". "),
    (re.compile(r"にいる"), " at "),
    (re.compile(r"への"), " to "),
    (re.compile(r"の"), " of "),
    (re.compile(r"人"), " person "),
    (re.compile(r"側"), " perspective "),
    (re.compile(r"\s+"), " "),
    (re.compile(r"\s+([,.)])"), r"\1"),
    (re.compile(r"\(\s+"), "("),
)

CHORD_FEEL_IDIOMS = MappingProxyType(
    {
        "不安定なマイナーループ、期待と違和感を同時に作る": (
            "Unstable minor loop creating both anticipation and unease"
        ),
        "上昇感を作る": "Creating ascending tension",
        "一時的な開放": "Temporary release",
        "解決しない": "Without resolution",
        "ダーク": "Dark",
        "明るい": "Bright",
        "ポップだが少しメランコリックなマイナー感": "Pop with a melancholic minor feel",
        "上昇する期待感と焦燥": "Rising anticipation and anxiety",
        "一瞬の静寂、覚悟": "Momentary silence, determination",
    }
)

DYNAMICS_IDIOMS = MappingProxyType(
    {
        "サビで爆発させるが、解決はしない": "Explosive choruses without resolution",
        "語るが、救わない": "Narrating without salvation",
        "軽快なのに切迫感がある": "Lively yet urgent",
        "激しい": "Intense",
        "穏やか": "Calm",
        "ドラマチック": "Dramatic",
        "エネルギッシュ": "Energetic",
    }
)

CONCEPT_KEYWORD_IMAGERY = MappingProxyType(
    {
        "完璧": "perfection",
        "嘘": "deception",
        "愛されたい": "longing for love",
        "虚構": "facade",
        "演技": "act",
        "光と影": "light and shadow",
        "孤独": "isolation",
        "仮面": "mask behind the smile",
        "本音": "hidden truth",
        "反逆": "rebellion",
        "叫び": "scream",
        "内省": "introspection",
        "葛藤": "inner conflict",
        "記憶": "memories",
        "別れ": "farewell",
        "夏": "summer",
        "夜": "night",
        "駆ける": "running through",
        "追いかける": "chasing",
        "手を伸ばす": "reaching out",
        "届かない": "unreachable",
        "焦燥": "desperation",
        "希望": "hope",
        "絶望": "despair",
        "光": "radiant light",
    }
)


def contains_japanese(text: str) -> bool:
    """Check whether ``text`` has any hiragana, katakana or kanji."""
    return bool(_JAPANESE_RE.search(text))


def translate_to_english(text: str) -> str:
    """Translate Japanese music terms in ``text`` to English.

    Text without Japanese characters is returned untouched, which also makes
    the function idempotent on its own output.
    """
    if not contains_japanese(text):
        return text

    override = PHRASE_OVERRIDES.get(text.strip())
    if override is not None:
        return override

    result = text
    for ja, en in _SORTED_TERMS:
        if ja in result:
            result = result.replace(ja, f" {en} ")

    for pattern, replacement in _CLEANUPS:
        result = pattern.sub(replacement, result)

    return result.strip()


def translate_array(items: list[str] | tuple[str, ...] | None) -> list[str]:
    return [translate_to_english(item) for item in items or ()]


def translate_chord_feel(feel: str) -> str:
    """Translate a chord-progression feel, preferring the idiom table."""
    return CHORD_FEEL_IDIOMS.get(feel.strip()) or translate_to_english(feel)


def translate_dynamics(dynamics: str) -> str:
    """Translate a dynamics description, preferring the idiom table."""
    return DYNAMICS_IDIOMS.get(dynamics.strip()) or translate_to_english(dynamics)


def translate_concept_keywords(keywords: list[str] | None) -> list[str]:
    """Translate concept keywords into English imagery."""
    return [
        CONCEPT_KEYWORD_IMAGERY.get(keyword.strip()) or translate_to_english(keyword)
        for keyword in keywords or ()
    ]
