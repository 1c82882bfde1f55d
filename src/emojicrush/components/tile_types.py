from dataclasses import dataclass, field
from typing import Dict, List, Optional

from emojicrush.components.special_kind import SpecialKind
from emojicrush.constants import SPECIAL_SYMBOLS

@dataclass(slots=True)
class TileTypes:
    """Canonical tile definitions stored on a single entity.

    kinds: basic tile kinds that spawn on the board and can be matched.
    specials: symbol used on the board for each special kind.
    """
    kinds: List[str]
    specials: Dict[SpecialKind, str] = field(default_factory=dict)
    _by_symbol: Dict[str, SpecialKind] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Preserve order while dropping duplicates.
        seen: set[str] = set()
        filtered: List[str] = []
        for name in self.kinds:
            if name not in seen:
                filtered.append(name)
                seen.add(name)
        self.kinds = filtered
        if not self.specials:
            self.specials = {kind: SPECIAL_SYMBOLS[kind.value] for kind in SpecialKind}
        self._by_symbol = {symbol: kind for kind, symbol in self.specials.items()}
        clash = set(self.kinds) & set(self._by_symbol)
        if clash:
            raise ValueError(f"Tile kinds overlap special symbols: {sorted(clash)}")

    def all_kinds(self) -> List[str]:
        return list(self.kinds)

    def is_basic(self, tile: Optional[str]) -> bool:
        return tile is not None and tile not in self._by_symbol

    def special_kind(self, tile: Optional[str]) -> Optional[SpecialKind]:
        if tile is None:
            return None
        return self._by_symbol.get(tile)

    def symbol_for(self, kind: SpecialKind) -> str:
        return self.specials[kind]
