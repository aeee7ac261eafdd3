"""牌型检测器 - 识别一组牌的掼蛋牌型（含逢人配填坑）并比较大小"""

import logging
from collections import Counter
from typing import List, Optional, Sequence

from .card import (
    Card, Rank, LEVEL_VALUE, NATURAL_VALUE, SMALL_JOKER_VALUE,
    check_level, is_wild, value_of,
)
from .pattern_type import PatternType, PatternResult

logger = logging.getLogger(__name__)

KING_BOMB_VALUE = 100

# 连牌（顺子/钢板/三连对）允许的最大权重：A，级牌(15)与王不能入连
_RUN_CEILING = NATURAL_VALUE[Rank.ACE]
# A2345 中 A 当 1
_ACE_LOW = 1
_LOWEST_NATURAL = NATURAL_VALUE[Rank.TWO]


def classify(cards: Sequence[Card], level: Rank) -> PatternResult:
    """
    识别一组牌的牌型，总是返回结果，无法识别时为 Invalid。
    按优先级依次尝试，前面的检测一旦给出结论（合法或非法）即停止。
    """
    if not cards:
        raise ValueError("classify() 至少需要一张牌")
    level = check_level(level)

    n = len(cards)
    others = [c for c in cards if not is_wild(c, level)]
    wc = n - len(others)
    vc = Counter(value_of(c, level) for c in others)
    rc = Counter(_run_value(c, level) for c in others)

    result = (
        _detect_king_bomb(cards, n)
        or _detect_bomb(n, vc)
        or _detect_single(cards, n, level)
        or _detect_jokers_only(cards, n, wc)
        or _detect_pair(cards, n, wc, vc)
        or _detect_triple(cards, n, vc)
        or _detect_five(others, n, wc, vc, level)
        or _detect_six(n, wc, vc, rc)
        or _detect_long(others, n, wc, level)
        or PatternResult.invalid(n)
    )
    logger.debug("classify %s @%s -> %r", cards, level.value, result)
    return result


# ============================================================
#  填坑辅助
# ============================================================

def _run_value(card: Card, level: Rank) -> int:
    """连牌中的点数：已指定替代的逢人配按所当作牌的自然点数，可补级牌的空位"""
    if card.acting_as is not None:
        return NATURAL_VALUE[card.face[1]]
    return value_of(card, level)


def _run_top(
    others: List[Card], wc: int, length: int, level: Rank, flush: bool
) -> Optional[int]:
    """
    顺子/同花顺填坑：从最低起点开始枚举连续区间，缺口由逢人配补。
    返回顺子最高点（A2345 为 5），不成立返回 None。
    """
    if flush and len({c.face[0] for c in others}) > 1:
        return None
    values = [_run_value(c, level) for c in others]
    if any(v > _RUN_CEILING for v in values):
        return None
    present = set(values)
    if len(present) != len(values):
        return None  # 非百搭牌有重复点数

    for low in range(_ACE_LOW, _RUN_CEILING - length + 2):
        high = low + length - 1
        if low == _ACE_LOW and high >= _RUN_CEILING:
            continue  # A 不能同时当 1 和 14
        gaps = 0
        for v in range(low, high + 1):
            natural = _RUN_CEILING if v == _ACE_LOW else v
            if natural not in present:
                gaps += 1
        if gaps <= wc:
            return high
    return None


def _group_run_top(vc: Counter, wc: int, groups: int, size: int) -> Optional[int]:
    """
    钢板/三连对填坑：groups 个连续点数各凑 size 张，缺口由逢人配补。
    返回最高点，不成立返回 None。
    """
    if sum(vc.values()) + wc != groups * size:
        return None
    if any(v > _RUN_CEILING for v in vc):
        return None
    if any(count > size for count in vc.values()):
        return None

    for low in range(_LOWEST_NATURAL, _RUN_CEILING - groups + 2):
        need = sum(size - vc.get(v, 0) for v in range(low, low + groups))
        if need <= wc:
            return low + groups - 1
    return None


# ============================================================
#  牌型检测
# ============================================================

def _detect_king_bomb(cards: Sequence[Card], n: int) -> Optional[PatternResult]:
    """四大天王：恰好 2 大王 + 2 小王"""
    if n != 4:
        return None
    ranks = Counter(c.face[1] for c in cards)
    if ranks[Rank.BIG_JOKER] == 2 and ranks[Rank.SMALL_JOKER] == 2:
        return PatternResult(PatternType.KING_BOMB, KING_BOMB_VALUE, 4)
    return None


def _detect_bomb(n: int, vc: Counter) -> Optional[PatternResult]:
    """炸弹：≥4张，非百搭牌同一点数（不含王），逢人配补足；纯逢人配不算"""
    if n < 4 or len(vc) != 1:
        return None
    value = next(iter(vc))
    if value >= SMALL_JOKER_VALUE:
        return None
    return PatternResult(PatternType.BOMB, value, n)


def _detect_single(cards: Sequence[Card], n: int, level: Rank) -> Optional[PatternResult]:
    if n == 1:
        return PatternResult(PatternType.SINGLE, value_of(cards[0], level), 1)
    return None


def _detect_jokers_only(cards: Sequence[Card], n: int, wc: int) -> Optional[PatternResult]:
    """纯大小王（非四大天王）不成牌"""
    if wc == 0 and all(c.is_joker for c in cards):
        return PatternResult.invalid(n)
    return None


def _detect_pair(
    cards: Sequence[Card], n: int, wc: int, vc: Counter
) -> Optional[PatternResult]:
    """对子：同权重两张（不含王），或逢人配 + 一张非王牌"""
    if n != 2:
        return None
    if any(c.is_joker for c in cards):
        return PatternResult.invalid(n)
    if wc == 2:
        return PatternResult(PatternType.PAIR, LEVEL_VALUE, 2)
    if len(vc) == 1:
        return PatternResult(PatternType.PAIR, next(iter(vc)), 2)
    return PatternResult.invalid(n)


def _detect_triple(cards: Sequence[Card], n: int, vc: Counter) -> Optional[PatternResult]:
    """三同张：不含王，非百搭牌同一点数，逢人配补足"""
    if n != 3:
        return None
    if any(c.is_joker for c in cards) or len(vc) != 1:
        return PatternResult.invalid(n)
    return PatternResult(PatternType.TRIPLE, next(iter(vc)), 3)


def _detect_five(
    others: List[Card], n: int, wc: int, vc: Counter, level: Rank
) -> Optional[PatternResult]:
    """5张：顺子 > 同花顺 > 三带二，取第一个成立的"""
    if n != 5:
        return None
    high = _run_top(others, wc, 5, level, flush=False)
    if high is not None:
        return PatternResult(PatternType.STRAIGHT, high, 5)
    high = _run_top(others, wc, 5, level, flush=True)
    if high is not None:
        return PatternResult(PatternType.STRAIGHT_FLUSH, high, 5)
    return _detect_triple_with_pair(vc, wc) or PatternResult.invalid(n)


def _detect_triple_with_pair(vc: Counter, wc: int) -> Optional[PatternResult]:
    """
    三带二：非百搭牌拆成「三张点数」+「对子点数」，缺口由逢人配补，
    不允许多余点数。按点数升序尝试三张，取第一种可行拆法。
    """
    if any(v >= SMALL_JOKER_VALUE for v in vc):
        return None

    values = sorted(vc)
    for triple in values:
        need = 3 - vc[triple]
        if need < 0 or need > wc:
            continue
        spare = wc - need
        rest = [v for v in values if v != triple]
        if not rest:
            if spare >= 2:
                # 对子全由逢人配充当
                return PatternResult(PatternType.TRIPLE_WITH_PAIR, triple, 5)
            continue
        if len(rest) != 1:
            continue
        pair_need = 2 - vc[rest[0]]
        if 0 <= pair_need <= spare:
            return PatternResult(PatternType.TRIPLE_WITH_PAIR, triple, 5)
    return None


def _detect_six(n: int, wc: int, vc: Counter, rc: Counter) -> Optional[PatternResult]:
    """6张：钢板 > 三连对 > 六张炸弹"""
    if n != 6:
        return None
    high = _group_run_top(rc, wc, groups=2, size=3)
    if high is not None:
        return PatternResult(PatternType.PLATE, high, 6)
    high = _group_run_top(rc, wc, groups=3, size=2)
    if high is not None:
        return PatternResult(PatternType.TUBE, high, 6)
    if len(vc) == 1:
        value = next(iter(vc))
        if value < SMALL_JOKER_VALUE:
            return PatternResult(PatternType.BOMB, value, 6)
    return PatternResult.invalid(n)


def _detect_long(
    others: List[Card], n: int, wc: int, level: Rank
) -> Optional[PatternResult]:
    """7张及以上：炸弹已在前面处理，这里只认长顺子"""
    if n < 7:
        return None
    high = _run_top(others, wc, n, level, flush=False)
    if high is not None:
        return PatternResult(PatternType.STRAIGHT, high, n)
    return PatternResult.invalid(n)


# ============================================================
#  牌型比较
# ============================================================

def bomb_rank(pattern: PatternResult) -> int:
    """
    炸弹等级：四大天王=7, 8张及以上=6, 7张=5, 6张=4, 同花顺=3,
    5张=2, 4张=1, 非炸弹=0
    """
    if pattern.type == PatternType.KING_BOMB:
        return 7
    if pattern.type == PatternType.STRAIGHT_FLUSH:
        return 3
    if pattern.type == PatternType.BOMB:
        if pattern.length >= 8:
            return 6
        if pattern.length == 7:
            return 5
        if pattern.length == 6:
            return 4
        if pattern.length == 5:
            return 2
        return 1
    return 0


def is_bomb_type(pattern: PatternResult) -> bool:
    return pattern.is_bomb_like


def beats(candidate: PatternResult, incumbent: PatternResult) -> bool:
    """
    判断 candidate 能否压过 incumbent。
    规则：
    1. 任一方非法则不能压
    2. 桌面为「不出」时任何合法牌都能出
    3. 炸弹之间先比等级，再比张数，最后比点数
    4. 炸弹压一切非炸弹
    5. 非炸弹必须同牌型同张数，比主特征值
    """
    if not candidate.is_valid or not incumbent.is_valid:
        return False
    if incumbent.type == PatternType.PASS:
        return True

    new_rank = bomb_rank(candidate)
    old_rank = bomb_rank(incumbent)

    if new_rank > 0 and old_rank > 0:
        if new_rank != old_rank:
            return new_rank > old_rank
        if candidate.length != incumbent.length:
            return candidate.length > incumbent.length
        return candidate.primary_value > incumbent.primary_value
    if new_rank > 0:
        return True
    if old_rank > 0:
        return False

    if candidate.type != incumbent.type:
        return False
    if candidate.length != incumbent.length:
        return False
    return candidate.primary_value > incumbent.primary_value
