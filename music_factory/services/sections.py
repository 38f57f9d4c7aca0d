"""Section naming and structure completion."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Sequence

from music_factory.models.analysis import Section as S
from music_factory.models.analysis import TargetLength

log = logging.getLogger(__name__)

# A provided structure shorter than this is replaced with the canonical default.
MIN_PROVIDED_SECTIONS = 8

SECTION_DISPLAY_NAMES: MappingProxyType[S, str] = MappingProxyType(
    {
        S.INTRO: "Intro",
        S.VERSE1: "Verse 1",
        S.VERSE2: "Verse 2",
        S.VERSE3: "Verse 3",
        S.PRE_CHORUS: "Pre-Chorus",
        S.CHORUS: "Chorus",
        S.POST_CHORUS: "Post-Chorus",
        S.INSTRUMENTAL: "Instrumental",
        S.DROP: "Drop",
        S.BREAKDOWN: "Breakdown",
        S.BRIDGE: "Bridge",
        S.FINAL_CHORUS: "Final Chorus",
        S.FINAL_CHORUS_REPEAT: "Final Chorus Repeat",
        S.OUTRO: "Outro",
    }
)

_DEFAULT_3MIN = (
    S.INTRO, S.VERSE1, S.PRE_CHORUS, S.CHORUS, S.POST_CHORUS, S.VERSE2, S.PRE_CHORUS,
    S.CHORUS, S.INSTRUMENTAL, S.BRIDGE, S.FINAL_CHORUS, S.FINAL_CHORUS_REPEAT, S.OUTRO,
)
_DEFAULT_4MIN = (
    S.INTRO, S.VERSE1, S.PRE_CHORUS, S.CHORUS, S.POST_CHORUS, S.VERSE2, S.PRE_CHORUS,
    S.CHORUS, S.POST_CHORUS, S.INSTRUMENTAL, S.BRIDGE, S.FINAL_CHORUS,
    S.FINAL_CHORUS_REPEAT, S.OUTRO,
)
_DEFAULT_5MIN = (
    S.INTRO, S.VERSE1, S.PRE_CHORUS, S.CHORUS, S.POST_CHORUS, S.VERSE2, S.PRE_CHORUS,
    S.CHORUS, S.POST_CHORUS, S.INSTRUMENTAL, S.VERSE3, S.PRE_CHORUS, S.BRIDGE,
    S.FINAL_CHORUS, S.FINAL_CHORUS_REPEAT, S.OUTRO,
)

DEFAULT_SECTIONS: MappingProxyType[str, tuple[S, ...]] = MappingProxyType(
    {"3min": _DEFAULT_3MIN, "4min": _DEFAULT_4MIN, "5min": _DEFAULT_5MIN}
)

MANDATORY_SECTIONS: MappingProxyType[str, tuple[S, ...]] = MappingProxyType(
    {
        "3min": (S.VERSE2, S.INSTRUMENTAL, S.BRIDGE, S.FINAL_CHORUS),
        "4min": (S.VERSE2, S.BRIDGE, S.FINAL_CHORUS),
        "5min": (S.VERSE2, S.BRIDGE, S.FINAL_CHORUS),
    }
)


def display_name(section: S) -> str:
    """Suno-facing name of a section, e.g. ``PreChorus`` -> ``Pre-Chorus``."""
    return SECTION_DISPLAY_NAMES[section]


def default_sections(target_length: TargetLength = "3min") -> list[S]:
    return list(DEFAULT_SECTIONS.get(target_length, _DEFAULT_3MIN))


def _canonical_rank(order: Sequence[S], section: S) -> int | None:
    try:
        return order.index(section)
    except ValueError:
        return None


def find_insert_position(sections: Sequence[S], section: S, order: Sequence[S]) -> int:
    """Index at which ``section`` should be inserted into ``sections``.

    Walks ``sections`` from the end and returns the slot right after the last
    section ranked before ``section`` in ``order``. Sections that do not appear
    in ``order`` carry no rank and are skipped.
    """
    target_rank = _canonical_rank(order, section)
    if target_rank is None:
        return len(sections)

    for i in range(len(sections) - 1, -1, -1):
        rank = _canonical_rank(order, sections[i])
        if rank is not None and rank < target_rank:
            return i + 1
    return 0


def resolve_sections(
    provided: Iterable[S] | None, target_length: TargetLength = "3min"
) -> list[S]:
    """Expand or repair a section list into a full structure for ``target_length``.

    Short or empty input is replaced wholesale by the canonical default. Longer
    input keeps every caller section in place and only gains the mandatory
    sections it lacks.
    """
    sections = [S(s) for s in provided or ()]
    order = DEFAULT_SECTIONS.get(target_length, _DEFAULT_3MIN)

    if len(sections) < MIN_PROVIDED_SECTIONS:
        if sections:
            log.debug(
                "Only %d sections provided, using %s default structure",
                len(sections),
                target_length,
            )
        return list(order)

    missing = [s for s in MANDATORY_SECTIONS.get(target_length, ()) if s not in sections]
    for section in missing:
        index = find_insert_position(sections, section, order)
        sections.insert(index, section)
        log.debug("Inserted missing %s at position %d", section.value, index)

    return sections


def format_section_chain(sections: Sequence[S], per_line: int = 4) -> str:
    """Render sections as an arrow chain, wrapping every ``per_line`` sections."""
    names = [display_name(s) for s in sections]
    lines = [
        " → ".join(names[i : i + per_line]) for i in range(0, len(names), per_line)
    ]
    return "\n→ ".join(lines)
