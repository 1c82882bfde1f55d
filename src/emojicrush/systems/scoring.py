from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from emojicrush.components.match import Match
from emojicrush.components.special_kind import SpecialTileCreation
from emojicrush.constants import (
    POINTS_RUN_3,
    POINTS_RUN_4,
    POINTS_RUN_5_PLUS,
    POINTS_SHAPED,
    SPECIAL_BONUS,
)


@dataclass(frozen=True, slots=True)
class StepScore:
    base: int
    special_bonus: int
    multiplier: int
    total: int


def points_per_tile(match: Match) -> int:
    if match.is_shaped:
        return POINTS_SHAPED
    if match.length >= 5:
        return POINTS_RUN_5_PLUS
    if match.length == 4:
        return POINTS_RUN_4
    return POINTS_RUN_3


def score_step(
    matches: Sequence[Match],
    specials: Sequence[SpecialTileCreation],
    multiplier: int,
) -> StepScore:
    """Score one cascade step.

    Every match counts its own positions, so a cell shared by a linear run and
    the shaped match built from it (or by two shaped matches) scores each time.
    ``multiplier`` is the combo value already advanced for this step.
    """
    base = sum(len(match.positions) * points_per_tile(match) for match in matches)
    special_bonus = SPECIAL_BONUS * len(specials)
    total = math.floor((base + special_bonus) * multiplier)
    return StepScore(base=base, special_bonus=special_bonus, multiplier=multiplier, total=total)
