"""桌面状态 - 教学牌桌的公共状态与出牌记录"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from guandan.engine.card import Card, Rank
from guandan.engine.pattern_type import PatternType
from guandan.table.player import Position


@dataclass
class PlayAction:
    """单次出牌动作记录"""
    action_id: str
    player: Position
    cards: List[Card]
    play_type: PatternType
    is_rule_violation: bool          # 牌型非法或压不住，仍然记录但标记违规
    timestamp: float

    @property
    def is_pass(self) -> bool:
        return self.play_type == PatternType.PASS


@dataclass
class TableEvent:
    """桌面事件记录"""
    action: str                      # "deal", "level", "assign", "return", "play", "pass"
    player: Optional[Position] = None
    data: Any = None


@dataclass
class TableState:
    """桌面公共状态"""
    level: Rank = Rank.TWO                    # 当前打几
    current_player: Position = Position.SOUTH
    history: List[PlayAction] = field(default_factory=list)

    def last_play(self) -> Optional[PlayAction]:
        """桌面最后一次有效出牌（跳过「不出」）"""
        for action in reversed(self.history):
            if not action.is_pass and action.cards:
                return action
        return None
