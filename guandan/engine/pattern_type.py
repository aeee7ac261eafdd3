"""牌型定义 - 掼蛋牌型枚举与识别结果"""

from enum import Enum
from dataclasses import dataclass

from .card import Suit, Rank


class PatternType(str, Enum):
    """牌型枚举"""
    SINGLE = "Single"                      # 单张
    PAIR = "Pair"                          # 对子
    TRIPLE = "Triple"                      # 三同张
    TRIPLE_WITH_PAIR = "TripleWithPair"    # 三带二
    STRAIGHT = "Straight"                  # 顺子
    STRAIGHT_FLUSH = "StraightFlush"       # 同花顺
    TUBE = "Tube"                          # 三连对（木板）
    PLATE = "Plate"                        # 钢板
    BOMB = "Bomb"                          # 炸弹 (≥4张)
    KING_BOMB = "KingBomb"                 # 四大天王
    PASS = "Pass"                          # 不出
    INVALID = "Invalid"                    # 非法


# 牌型中文名
PATTERN_TYPE_NAME = {
    PatternType.SINGLE: "单张",
    PatternType.PAIR: "对子",
    PatternType.TRIPLE: "三同张",
    PatternType.TRIPLE_WITH_PAIR: "三带二",
    PatternType.STRAIGHT: "顺子",
    PatternType.STRAIGHT_FLUSH: "同花顺",
    PatternType.TUBE: "三连对",
    PatternType.PLATE: "钢板",
    PatternType.BOMB: "炸弹",
    PatternType.KING_BOMB: "四大天王",
    PatternType.PASS: "不出",
    PatternType.INVALID: "非法牌型",
}

BOMB_TYPES = frozenset({
    PatternType.BOMB,
    PatternType.STRAIGHT_FLUSH,
    PatternType.KING_BOMB,
})


@dataclass(frozen=True)
class PatternResult:
    """一组牌的识别结果

    primary_value 是同牌型比大小的主特征值：炸弹/三张取其点数，
    顺子类取最高点，四大天王固定为 100。
    """
    type: PatternType
    primary_value: int = 0
    length: int = 0
    is_valid: bool = True

    @classmethod
    def invalid(cls, length: int) -> "PatternResult":
        return cls(PatternType.INVALID, 0, length, is_valid=False)

    @classmethod
    def pass_(cls) -> "PatternResult":
        """桌面「不出」：合法，但任何合法牌都能压"""
        return cls(PatternType.PASS, 0, 0)

    @property
    def is_bomb_like(self) -> bool:
        return self.type in BOMB_TYPES

    @property
    def name(self) -> str:
        return PATTERN_TYPE_NAME[self.type]

    def __repr__(self) -> str:
        return f"[{self.type.value} {self.primary_value} x{self.length}]"


@dataclass(frozen=True)
class WildcardSuggestion:
    """逢人配的一种合法替代"""
    suit: Suit
    rank: Rank
    display_label: str
