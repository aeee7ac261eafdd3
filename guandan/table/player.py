"""玩家模型 - 掼蛋四家玩家的数据结构"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List

from guandan.engine.card import Card, Rank, sort_hand
from guandan.engine.pattern_type import PatternType


class Position(str, Enum):
    """玩家方位"""
    EAST = "EAST"
    SOUTH = "SOUTH"
    WEST = "WEST"
    NORTH = "NORTH"


# 出牌轮转顺序：南 → 东 → 北 → 西
PLAY_ORDER = [Position.SOUTH, Position.EAST, Position.NORTH, Position.WEST]


def next_position(current: Position) -> Position:
    idx = PLAY_ORDER.index(current)
    return PLAY_ORDER[(idx + 1) % len(PLAY_ORDER)]


@dataclass
class OrganizedGroup:
    """理牌分组：玩家手动归拢的一组牌及其牌型"""
    card_ids: List[str]
    type: PatternType
    primary_value: int
    length: int
    is_bomb: bool


@dataclass
class Player:
    """一个玩家"""
    position: Position
    hand: List[Card] = field(default_factory=list)
    is_revealed: bool = False        # 明牌
    groups: List[OrganizedGroup] = field(default_factory=list)

    @property
    def hand_size(self) -> int:
        return len(self.hand)

    def sort_hand(self, level: Rank) -> None:
        """手牌排序"""
        self.hand = sort_hand(self.hand, level)

    def find_card(self, card_id: str) -> Card:
        for card in self.hand:
            if card.id == card_id:
                return card
        raise KeyError(card_id)

    def has_cards(self, cards: List[Card]) -> bool:
        """检查手牌中是否包含指定的牌（按唯一标识）"""
        held = {c.id for c in self.hand}
        ids = [c.id for c in cards]
        return len(set(ids)) == len(ids) and all(i in held for i in ids)

    def remove_cards(self, cards: List[Card]) -> None:
        """从手牌中移除指定的牌，并拆掉包含这些牌的理牌分组"""
        removed = {c.id for c in cards}
        self.hand = [c for c in self.hand if c.id not in removed]
        self.groups = [
            g for g in self.groups if not any(i in removed for i in g.card_ids)
        ]

    def clear(self) -> List[Card]:
        """清空手牌，返回被清掉的牌"""
        cards, self.hand = self.hand, []
        self.groups = []
        return cards
