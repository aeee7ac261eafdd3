"""牌的定义 - 掼蛋两副牌108张的数据模型、动态权重与理牌"""

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple


class Suit(str, Enum):
    """花色枚举"""
    SPADES = "Spades"
    HEARTS = "Hearts"
    CLUBS = "Clubs"
    DIAMONDS = "Diamonds"
    JOKER = "Joker"


class Rank(str, Enum):
    """点数枚举（大小由级牌动态决定，见 value_of）"""
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"
    SMALL_JOKER = "Small"
    BIG_JOKER = "Big"


# 普通花色与普通点数（不含大小王）
NATURAL_SUITS = (Suit.SPADES, Suit.HEARTS, Suit.CLUBS, Suit.DIAMONDS)
NATURAL_RANKS = tuple(r for r in Rank if r not in (Rank.SMALL_JOKER, Rank.BIG_JOKER))

# 自然点数（A=14，用于连牌判断）
NATURAL_VALUE: Dict[Rank, int] = {r: i for i, r in enumerate(NATURAL_RANKS, start=2)}

LEVEL_VALUE = 15
SMALL_JOKER_VALUE = 16
BIG_JOKER_VALUE = 17

# 同权重时的花色顺序：♠ > ♥ > ♣ > ♦（值小者靠前）
SUIT_PRIORITY = {
    Suit.JOKER: -1,
    Suit.SPADES: 0,
    Suit.HEARTS: 1,
    Suit.CLUBS: 2,
    Suit.DIAMONDS: 3,
}

SUIT_SYMBOL = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.JOKER: "🃏",
}

# 点数显示映射
RANK_DISPLAY = {r: r.value for r in NATURAL_RANKS}
RANK_DISPLAY[Rank.SMALL_JOKER] = "小王"
RANK_DISPLAY[Rank.BIG_JOKER] = "大王"


@dataclass(frozen=True)
class Card:
    """一张实体牌

    deck 区分两副牌中的同一张（1 或 2），acting_as 只在逢人配被指定
    「当作」某张牌打出时才有值。
    """
    suit: Suit
    rank: Rank
    deck: int = 1
    acting_as: Optional[Tuple[Suit, Rank]] = None

    def __post_init__(self) -> None:
        is_joker_rank = self.rank in (Rank.SMALL_JOKER, Rank.BIG_JOKER)
        if is_joker_rank != (self.suit == Suit.JOKER):
            raise ValueError(f"花色与点数不匹配: {self.suit!r} {self.rank!r}")
        if self.deck not in (1, 2):
            raise ValueError(f"deck 只能是 1 或 2: {self.deck}")
        if self.acting_as is not None and self.acting_as[0] == Suit.JOKER:
            raise ValueError("逢人配不能当作大小王")

    @property
    def id(self) -> str:
        """全局唯一标识，如 'Hearts-5-1' / 'Hearts-5-2'"""
        return f"{self.suit.value}-{self.rank.value}-{self.deck}"

    @property
    def face(self) -> Tuple[Suit, Rank]:
        """参与牌型判断的身份：已指定替代时取替代牌，否则取本身"""
        if self.acting_as is not None:
            return self.acting_as
        return self.suit, self.rank

    @property
    def is_joker(self) -> bool:
        return self.face[0] == Suit.JOKER

    @property
    def display(self) -> str:
        text = _label(self.suit, self.rank)
        if self.acting_as is not None:
            text += "→" + _label(*self.acting_as)
        return text

    def acting(self, suit: Suit, rank: Rank) -> "Card":
        """返回一张被指定当作 (suit, rank) 使用的副本"""
        return replace(self, acting_as=(suit, rank))

    def __repr__(self) -> str:
        return self.display


def _label(suit: Suit, rank: Rank) -> str:
    if suit == Suit.JOKER:
        return RANK_DISPLAY[rank]
    return f"{SUIT_SYMBOL[suit]}{RANK_DISPLAY[rank]}"


def check_level(level) -> Rank:
    """校验级牌点数（接受 Rank 或其字符串值）"""
    rank = Rank(level)
    if rank in (Rank.SMALL_JOKER, Rank.BIG_JOKER):
        raise ValueError(f"大小王不能作为级牌: {level!r}")
    return rank


# ============================================================
#  动态权重
# ============================================================

def value_of(card: Card, level: Rank) -> int:
    """
    计算一张牌在当前级牌下的动态权重。
    普通牌 2~A = 2~14 < 级牌(任意花色) 15 < 小王 16 < 大王 17
    """
    suit, rank = card.face
    if suit == Suit.JOKER:
        return BIG_JOKER_VALUE if rank == Rank.BIG_JOKER else SMALL_JOKER_VALUE
    if rank == level:
        return LEVEL_VALUE
    return NATURAL_VALUE[rank]


def is_wild(card: Card, level: Rank) -> bool:
    """逢人配：红桃级牌，且尚未被指定替代"""
    return (
        card.acting_as is None
        and card.suit == Suit.HEARTS
        and card.rank == level
    )


# ============================================================
#  理牌
# ============================================================

def sort_hand(cards: Iterable[Card], level: Rank) -> List[Card]:
    """
    理牌（不修改原列表）：
    1. 逢人配排最前
    2. 其余按动态权重降序（大王 > 小王 > 级牌 > A > … > 2）
    3. 同权重按花色 ♠ ♥ ♣ ♦
    """
    level = check_level(level)
    return sorted(
        cards,
        key=lambda c: (
            0 if is_wild(c, level) else 1,
            -value_of(c, level),
            SUIT_PRIORITY[c.face[0]],
        ),
    )


def rank_order_large_to_small(level: Rank) -> List[Rank]:
    """点数从大到小：大王、小王、级牌，然后 A、K … 2（跳过级牌）"""
    level = check_level(level)
    naturals = [r for r in reversed(NATURAL_RANKS) if r != level]
    return [Rank.BIG_JOKER, Rank.SMALL_JOKER, level] + naturals


def group_by_rank(
    cards: Sequence[Card], level: Rank, ascending: bool = False
) -> List[List[Card]]:
    """按点数分列（逢人配归入级牌列），列内按理牌顺序"""
    order = rank_order_large_to_small(level)
    if ascending:
        order.reverse()
    ordered = sort_hand(cards, level)
    groups = []
    for rank in order:
        column = [c for c in ordered if c.rank == rank]
        if column:
            groups.append(column)
    return groups


# ============================================================
#  牌堆
# ============================================================

def create_deck() -> List[Card]:
    """创建两副牌共108张（每副52张 + 大小王）"""
    deck: List[Card] = []
    for deck_index in (1, 2):
        for suit in NATURAL_SUITS:
            for rank in NATURAL_RANKS:
                deck.append(Card(suit=suit, rank=rank, deck=deck_index))
        deck.append(Card(suit=Suit.JOKER, rank=Rank.SMALL_JOKER, deck=deck_index))
        deck.append(Card(suit=Suit.JOKER, rank=Rank.BIG_JOKER, deck=deck_index))

    assert len(deck) == 108, f"牌数错误: {len(deck)}"
    return deck


def shuffle_and_deal(
    deck: List[Card], players: int = 4, rng: Optional[random.Random] = None
) -> List[List[Card]]:
    """洗牌后轮流发完，返回每家手牌（按发牌顺序）"""
    shuffled = deck.copy()
    (rng or random).shuffle(shuffled)

    hands: List[List[Card]] = [[] for _ in range(players)]
    for i, card in enumerate(shuffled):
        hands[i % players].append(card)
    return hands


# ============================================================
#  文本解析
# ============================================================

_SUIT_BY_TEXT = {
    "♠": Suit.SPADES, "S": Suit.SPADES,
    "♥": Suit.HEARTS, "H": Suit.HEARTS,
    "♣": Suit.CLUBS, "C": Suit.CLUBS,
    "♦": Suit.DIAMONDS, "D": Suit.DIAMONDS,
}

_JOKER_BY_TEXT = {
    "小王": Rank.SMALL_JOKER, "SMALL": Rank.SMALL_JOKER,
    "大王": Rank.BIG_JOKER, "BIG": Rank.BIG_JOKER,
}


def parse_card(text: str, deck: int = 1) -> Card:
    """解析单张牌文本（如 '♠A', 'H10', '小王'）"""
    text = text.strip()
    joker = _JOKER_BY_TEXT.get(text.upper())
    if joker is not None:
        return Card(suit=Suit.JOKER, rank=joker, deck=deck)
    suit = _SUIT_BY_TEXT.get(text[:1].upper())
    if suit is None:
        raise ValueError(f"无法解析花色: {text!r}")
    try:
        rank = Rank(text[1:].upper())
    except ValueError:
        raise ValueError(f"无法解析点数: {text!r}") from None
    return Card(suit=suit, rank=rank, deck=deck)


def parse_cards(text: str) -> List[Card]:
    """解析空格分隔的一组牌；同一张牌出现第二次时记为第二副牌"""
    cards: List[Card] = []
    seen: Dict[Tuple[Suit, Rank], int] = {}
    for token in text.split():
        card = parse_card(token)
        key = (card.suit, card.rank)
        seen[key] = seen.get(key, 0) + 1
        if seen[key] > 2:
            raise ValueError(f"两副牌中 {token} 最多只有两张")
        cards.append(replace(card, deck=seen[key]))
    return cards
