"""Single-line thumbnail prompt for a 16:9 cover image."""

from __future__ import annotations

from music_factory.models.analysis import Analysis
from music_factory.services.translations import (
    translate_concept_keywords,
    translate_dynamics,
    translate_to_english,
)

BASE_CONSTRAINTS = ("16:9 aspect ratio", "no text", "no typography", "no letters")
CLOSING_STYLE = (
    "anime-inspired illustration style",
    "high quality digital art",
    "cinematic composition",
)
DEFAULT_VISUAL_STYLE = "soft ambient lighting, aesthetic composition"

# (synonyms matched case-insensitively, motifs contributed)
THEME_MOTIFS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("夏", "summer"), ("summer sky", "golden sunlight")),
    (("夜", "night"), ("starry night", "moonlight")),
    (("記憶", "memory", "memories"), ("faded photograph effect", "nostalgic atmosphere")),
    (("別れ", "farewell"), ("distant silhouette", "melancholic mood")),
    (("恋", "愛", "love", "crush"), ("warm colors", "soft bokeh")),
    (("時間", "time"), ("clock hands", "long exposure light trails")),
    (("季節", "seasons"), ("drifting petals", "changing foliage")),
    (("夢", "dream", "dreams"), ("floating particles", "surreal sky")),
    (("炎", "fire", "battle", "戦い"), ("embers in the air", "dramatic backlight")),
    (("孤独", "isolation", "loneliness"), ("lone figure", "empty street")),
    (("運命", "fate"), ("red thread", "crossroads")),
    (("距離", "distance"), ("vast horizon", "figure in the distance")),
)

_ENERGY_COMPOSITION = {
    "build": "dynamic composition, ascending perspective",
    "wave": "flowing movement, rhythmic patterns",
}
_CALM_COMPOSITION = "calm serene atmosphere, balanced composition"


def visual_style_for_genres(genre_tags: list[str]) -> str:
    genres = " ".join(genre_tags).lower()
    if "rock" in genres or "alternative" in genres:
        return "urban nightscape, city lights, moody lighting"
    if "k-pop" in genres:
        return "bright pastel colors, modern aesthetic, soft glow"
    if "indie" in genres:
        return "nostalgic film grain, warm tones, golden hour light"
    if "ballad" in genres:
        return "soft focus, dreamy atmosphere, ethereal light"
    return DEFAULT_VISUAL_STYLE


def theme_motifs(themes: list[str] | None) -> list[str]:
    """Visual motifs for every theme, accumulating across matches."""
    motifs: list[str] = []
    for theme in themes or ():
        lower = theme.lower()
        for synonyms, visuals in THEME_MOTIFS:
            if any(word in lower for word in synonyms):
                motifs.extend(v for v in visuals if v not in motifs)
    return motifs


def generate_image_prompt(analysis: Analysis) -> str:
    parts = list(BASE_CONSTRAINTS)
    parts.append(visual_style_for_genres(analysis.arrangement.genre_tags))

    if analysis.arrangement.dynamics:
        parts.append(f"{translate_dynamics(analysis.arrangement.dynamics).lower()} atmosphere")

    if analysis.concept_keywords:
        parts.extend(translate_concept_keywords(analysis.concept_keywords))

    parts.extend(theme_motifs(analysis.lyrics_design.theme))

    if analysis.lyrics_design.scenery:
        parts.append(translate_to_english(analysis.lyrics_design.scenery))

    parts.append(
        _ENERGY_COMPOSITION.get(analysis.music_structure.energy_curve, _CALM_COMPOSITION)
    )
    parts.extend(CLOSING_STYLE)
    return ", ".join(p for p in parts if p)
