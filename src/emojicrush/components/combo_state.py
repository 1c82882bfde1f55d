from dataclasses import dataclass

from emojicrush.constants import MAX_COMBO_MULTIPLIER

@dataclass(slots=True)
class ComboState:
    """Running combo multiplier in [1, max_multiplier]."""
    multiplier: int = 1
    max_multiplier: int = MAX_COMBO_MULTIPLIER

    def advance(self, had_matches: bool) -> int:
        if had_matches:
            self.multiplier = min(self.multiplier + 1, self.max_multiplier)
        else:
            self.multiplier = 1
        return self.multiplier

    def reset(self) -> None:
        self.multiplier = 1
