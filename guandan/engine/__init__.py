# 掼蛋规则引擎
from .card import (
    Card, Rank, Suit, create_deck, shuffle_and_deal, sort_hand,
    value_of, is_wild, rank_order_large_to_small, group_by_rank,
    parse_card, parse_cards,
)
from .pattern_type import PatternType, PatternResult, WildcardSuggestion
from .pattern_detector import classify, beats, bomb_rank, is_bomb_type
from .wildcard import enumerate_substitutions
