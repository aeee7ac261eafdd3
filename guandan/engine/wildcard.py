"""逢人配替代枚举 - 列出红桃级牌可以「当作」哪些牌打出"""

import logging
from typing import List, Sequence

from .card import (
    Card, Rank, Suit, NATURAL_RANKS, NATURAL_SUITS, RANK_DISPLAY, SUIT_SYMBOL,
    check_level, is_wild,
)
from .pattern_type import WildcardSuggestion
from .pattern_detector import classify

logger = logging.getLogger(__name__)


def enumerate_substitutions(cards: Sequence[Card], level: Rank) -> List[WildcardSuggestion]:
    """
    穷举 52 种普通牌身份，把牌组中的每张逢人配都指定为该身份后重新识别，
    保留能组成合法牌型的替代。跳过逢人配自身，以及组内非百搭牌已有的牌。
    没有逢人配或没有合法替代时返回空列表。
    """
    level = check_level(level)
    if not any(is_wild(c, level) for c in cards):
        return []

    taken = {c.face for c in cards if not is_wild(c, level)}
    suggestions: List[WildcardSuggestion] = []
    for suit in NATURAL_SUITS:
        for rank in NATURAL_RANKS:
            if suit == Suit.HEARTS and rank == level:
                continue  # 不替代自身
            if (suit, rank) in taken:
                continue
            trial = [c.acting(suit, rank) if is_wild(c, level) else c for c in cards]
            if classify(trial, level).is_valid:
                suggestions.append(WildcardSuggestion(
                    suit=suit,
                    rank=rank,
                    display_label=f"{SUIT_SYMBOL[suit]}{RANK_DISPLAY[rank]}",
                ))

    logger.debug("enumerate_substitutions %s @%s -> %d 种", cards, level.value, len(suggestions))
    return suggestions
