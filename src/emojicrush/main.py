"""Headless autoplay for the Emoji Crush core.

Plays games by always taking the hinted move, shuffling when the board is
stuck, and logs a summary per game.
"""
from __future__ import annotations

import argparse
import logging
import random
from typing import Optional, Sequence

from emojicrush.components.game_state import GameMode
from emojicrush.components.power_up_inventory import PowerUpKind
from emojicrush.constants import DEFAULT_GOAL, DEFAULT_MOVES, DEFAULT_PALETTE, GRID_SIZE, TILE_PALETTES
from emojicrush.engine import CrushEngine
from emojicrush.events.bus import EVENT_GAME_OVER, EVENT_LEVEL_COMPLETED
from emojicrush.utils.game_state import get_game_state
from emojicrush.utils.session import get_stats

logger = logging.getLogger("emojicrush")


def play_game(engine: CrushEngine, max_actions: int = 1000) -> dict:
    """Play until the level ends or ``max_actions`` swaps and power-ups were tried."""
    result: dict = {}
    engine.event_bus.subscribe(EVENT_LEVEL_COMPLETED, lambda s, **k: result.update(outcome="level_complete"))
    engine.event_bus.subscribe(EVENT_GAME_OVER, lambda s, **k: result.update(outcome=k["reason"]))

    for _ in range(max_actions):
        if get_game_state(engine.world).mode is not GameMode.PLAYING:
            break
        suggestion = engine.hint()
        if suggestion is None:
            shuffled = engine.apply_power_up(PowerUpKind.SHUFFLE)
            if not shuffled.applied:
                engine.game_flow_system.check_game_end()
                break
            continue
        engine.try_swap(*suggestion.move)

    stats = get_stats(engine.world)
    result.setdefault("outcome", "unfinished")
    result.update(
        score=engine.session.score,
        moves_remaining=engine.session.moves_remaining,
        matches=stats.total_matches,
        specials=stats.total_specials,
        longest_combo=stats.longest_combo,
    )
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Autoplay Emoji Crush games with the hint policy')
    parser.add_argument('--games', type=int, default=1, help='Number of games to play')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the first game')
    parser.add_argument('--size', type=int, default=GRID_SIZE, help='Board size (NxN)')
    parser.add_argument('--moves', type=int, default=DEFAULT_MOVES, help='Move budget per game')
    parser.add_argument('--goal', type=int, default=DEFAULT_GOAL, help='Goal score per game')
    parser.add_argument('--palette', choices=sorted(TILE_PALETTES), default=DEFAULT_PALETTE, help='Tile palette')
    parser.add_argument('--log-level', default='INFO', help='Logging level (DEBUG, INFO, WARNING, ...)')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    seeds = random.Random(args.seed)
    for game in range(1, args.games + 1):
        engine = CrushEngine(
            rng=random.Random(seeds.getrandbits(32)),
            size=args.size,
            moves=args.moves,
            goal=args.goal,
            palette=args.palette,
        )
        summary = play_game(engine)
        logger.info(
            "Game %d: %s, score=%d, moves left=%d, matches=%d, specials=%d, best combo=x%d",
            game,
            summary["outcome"],
            summary["score"],
            summary["moves_remaining"],
            summary["matches"],
            summary["specials"],
            summary["longest_combo"],
        )
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
