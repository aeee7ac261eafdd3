"""牌桌控制器 - 教学牌桌：排牌、发牌、定级、出牌判定"""

import logging
import random
import time
import uuid
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from guandan.engine.card import (
    Card, Rank, Suit, NATURAL_RANKS, NATURAL_SUITS,
    check_level, create_deck, is_wild, shuffle_and_deal,
)
from guandan.engine.pattern_type import PatternType, PatternResult
from guandan.engine.pattern_detector import classify, beats
from guandan.table.player import Player, Position, OrganizedGroup, PLAY_ORDER, next_position
from guandan.table.table_state import PlayAction, TableEvent, TableState

logger = logging.getLogger(__name__)

# 两副牌每种牌最多 2 张
COPIES_PER_CARD = 2
CARDS_PER_PLAYER = 27

PoolKey = Tuple[Suit, Rank]


class TableError(Exception):
    """牌桌操作不合法（不是牌型判定失败）"""


def _full_pool() -> Dict[PoolKey, int]:
    pool = {(s, r): COPIES_PER_CARD for s in NATURAL_SUITS for r in NATURAL_RANKS}
    pool[(Suit.JOKER, Rank.SMALL_JOKER)] = COPIES_PER_CARD
    pool[(Suit.JOKER, Rank.BIG_JOKER)] = COPIES_PER_CARD
    return pool


class TableController:
    """牌桌控制器：维护四家手牌、排牌卡池和出牌记录"""

    def __init__(self, level: Rank = Rank.TWO, rng: Optional[random.Random] = None):
        self.players: Dict[Position, Player] = {
            p: Player(position=p, is_revealed=(p == Position.SOUTH)) for p in Position
        }
        self.state = TableState(level=check_level(level))
        self.pool = _full_pool()
        self.rng = rng or random.Random()
        self._callbacks: List[Callable[[TableEvent], None]] = []

    def on_event(self, callback: Callable[[TableEvent], None]) -> None:
        """注册事件回调"""
        self._callbacks.append(callback)

    def _emit(self, event: TableEvent) -> None:
        for cb in self._callbacks:
            cb(event)

    @property
    def level(self) -> Rank:
        return self.state.level

    def player(self, position: Position) -> Player:
        return self.players[position]

    def _sort_all(self) -> None:
        for p in self.players.values():
            p.sort_hand(self.level)

    # ============================================================
    #  定级
    # ============================================================

    def set_level(self, rank: Rank) -> None:
        """切换级牌：逢人配与权重随之变化，重新理牌"""
        self.state.level = check_level(rank)
        self._sort_all()
        logger.info("级牌切换为 %s", self.level.value)
        self._emit(TableEvent("level", data=self.level))

    def toggle_reveal(self, position: Position) -> None:
        p = self.players[position]
        p.is_revealed = not p.is_revealed

    # ============================================================
    #  排牌（卡池）
    # ============================================================

    def pool_remaining(self, suit: Suit, rank: Rank) -> int:
        return self.pool[(suit, rank)]

    def _held_decks(self, suit: Suit, rank: Rank) -> set:
        return {
            c.deck
            for p in self.players.values()
            for c in p.hand
            if c.suit == suit and c.rank == rank
        }

    def _put_back(self, cards: Sequence[Card]) -> None:
        for c in cards:
            key = (c.suit, c.rank)
            self.pool[key] = min(COPIES_PER_CARD, self.pool[key] + 1)

    def assign_card(self, suit: Suit, rank: Rank, position: Position) -> Card:
        """从卡池取一张牌发给指定玩家"""
        key = (suit, rank)
        if key not in self.pool:
            raise TableError(f"不存在的牌: {suit.value}-{rank.value}")
        if self.pool[key] <= 0:
            raise TableError(f"{suit.value}-{rank.value} 已经发完")

        held = self._held_decks(suit, rank)
        deck = min(d for d in range(1, COPIES_PER_CARD + 1) if d not in held)
        card = Card(suit=suit, rank=rank, deck=deck)

        self.pool[key] -= 1
        player = self.players[position]
        player.hand.append(card)
        player.sort_hand(self.level)
        self._emit(TableEvent("assign", position, card))
        return card

    def return_card(self, card_id: str, position: Position) -> Card:
        """把玩家的一张牌退回卡池"""
        player = self.players[position]
        try:
            card = player.find_card(card_id)
        except KeyError:
            raise TableError(f"{position.value} 手中没有 {card_id}") from None
        player.remove_cards([card])
        self._put_back([card])
        self._emit(TableEvent("return", position, card))
        return card

    def clear_hand(self, position: Position) -> None:
        self._put_back(self.players[position].clear())
        self.state.history.clear()

    def clear_all(self) -> None:
        for p in self.players.values():
            p.clear()
        self.pool = _full_pool()
        self.state.history.clear()

    # ============================================================
    #  随机发牌
    # ============================================================

    def deal(self) -> None:
        """一键随机发牌：108 张一次发完，每人 27 张"""
        self.clear_all()
        hands = shuffle_and_deal(create_deck(), players=len(PLAY_ORDER), rng=self.rng)
        for position, hand in zip(PLAY_ORDER, hands):
            assert len(hand) == CARDS_PER_PLAYER
            self.players[position].hand = hand
        self.pool = {key: 0 for key in self.pool}
        self._sort_all()
        logger.info("随机发牌完成，级牌 %s", self.level.value)
        self._emit(TableEvent("deal"))

    # ============================================================
    #  出牌
    # ============================================================

    def last_pattern(self) -> Optional[PatternResult]:
        """桌面最后一次有效出牌的牌型（用于压制判断）"""
        action = self.state.last_play()
        if action is None:
            return None
        return classify(action.cards, self.level)

    def _check_turn(self, position: Position) -> None:
        if position != self.state.current_player:
            raise TableError(
                f"现在轮到 {self.state.current_player.value}，不是 {position.value}"
            )

    def play(
        self,
        position: Position,
        cards: Sequence[Card],
        acting_as: Optional[Tuple[Suit, Rank]] = None,
    ) -> PlayAction:
        """
        出牌并判定。
        acting_as 指定逢人配当作的牌；非法牌型或压不住时仍然出牌，
        但记录为违规（教学模式下的错误包容）。
        """
        self._check_turn(position)
        if not cards:
            raise TableError("请先选择要出的牌")
        player = self.players[position]
        if not player.has_cards(list(cards)):
            raise TableError(f"{position.value} 手中没有这些牌: {list(cards)}")

        if acting_as is not None:
            cards = [c.acting(*acting_as) if is_wild(c, self.level) else c for c in cards]
        else:
            cards = list(cards)

        pattern = classify(cards, self.level)
        last = self.last_pattern()
        violation = not pattern.is_valid or (last is not None and not beats(pattern, last))
        if violation:
            logger.warning(
                "%s 违规出牌 %s: %r 对桌面 %r", position.value, cards, pattern, last
            )
        else:
            logger.info("%s 出牌 %s: %r", position.value, cards, pattern)

        action = self._record(position, cards, pattern.type, violation)
        player.remove_cards(cards)
        # 教学牌桌：打出的牌归还卡池
        self._put_back(cards)
        self._emit(TableEvent("play", position, action))
        return action

    def pass_turn(self, position: Position) -> PlayAction:
        """不出"""
        self._check_turn(position)
        action = self._record(position, [], PatternType.PASS, False)
        logger.info("%s 不出", position.value)
        self._emit(TableEvent("pass", position, action))
        return action

    def _record(
        self, position: Position, cards: List[Card], play_type: PatternType, violation: bool
    ) -> PlayAction:
        action = PlayAction(
            action_id=f"action-{uuid.uuid4().hex[:12]}",
            player=position,
            cards=cards,
            play_type=play_type,
            is_rule_violation=violation,
            timestamp=time.time(),
        )
        self.state.history.append(action)
        self.state.current_player = next_position(position)
        return action

    def clear_history(self) -> None:
        self.state.history.clear()

    def set_current_player(self, position: Position) -> None:
        """上帝之手：直接指定出牌方"""
        self.state.current_player = position

    # ============================================================
    #  理牌分组
    # ============================================================

    def organize(self, position: Position, card_ids: Sequence[str]) -> Optional[OrganizedGroup]:
        """把选中的牌归为一组；与已有分组重叠时不执行，返回 None"""
        player = self.players[position]
        grouped = {i for g in player.groups for i in g.card_ids}
        if any(i in grouped for i in card_ids):
            return None
        try:
            cards = [player.find_card(i) for i in card_ids]
        except KeyError as e:
            raise TableError(f"{position.value} 手中没有 {e.args[0]}") from None

        pattern = classify(cards, self.level)
        group = OrganizedGroup(
            card_ids=list(card_ids),
            type=pattern.type,
            primary_value=pattern.primary_value,
            length=pattern.length,
            is_bomb=pattern.is_bomb_like,
        )
        player.groups.append(group)
        return group

    def restore_group(self, position: Position, card_ids: Sequence[str]) -> None:
        """拆掉与 card_ids 完全一致的分组"""
        player = self.players[position]
        ids = set(card_ids)
        player.groups = [g for g in player.groups if set(g.card_ids) != ids]

    def restore_all(self, position: Position) -> None:
        self.players[position].groups = []
