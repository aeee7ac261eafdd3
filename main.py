"""掼蛋教学辅助 - 命令行入口"""

import argparse
import logging
import os
import random
import sys

from guandan.engine.card import check_level, parse_cards, sort_hand, group_by_rank, is_wild
from guandan.engine.pattern_detector import classify, beats
from guandan.engine.wildcard import enumerate_substitutions
from guandan.table.controller import TableController
from guandan.table.player import PLAY_ORDER


def _fmt(cards) -> str:
    return " ".join(c.display for c in cards)


def cmd_classify(args) -> int:
    """识别牌型"""
    cards = parse_cards(args.cards)
    result = classify(cards, args.level)
    print(f"{_fmt(cards)}  =>  {result.name} {result!r}")
    return 0 if result.is_valid else 1


def cmd_beats(args) -> int:
    """判断能否压牌"""
    new = classify(parse_cards(args.cards), args.level)
    old = classify(parse_cards(args.table), args.level)
    ok = beats(new, old)
    print(f"{new.name} {new!r}  {'压得住' if ok else '压不住'}  {old.name} {old!r}")
    return 0 if ok else 1


def cmd_wild(args) -> int:
    """列出逢人配的合法替代"""
    cards = parse_cards(args.cards)
    options = enumerate_substitutions(cards, args.level)
    if not options:
        print("未找到合法替代方案")
        return 1
    for opt in options:
        trial = [c.acting(opt.suit, opt.rank) if is_wild(c, args.level) else c for c in cards]
        print(f"  {opt.display_label}  ->  {classify(trial, args.level).name}")
    return 0


def cmd_sort(args) -> int:
    """理牌"""
    cards = parse_cards(args.cards)
    if args.columns:
        for column in group_by_rank(cards, args.level):
            print(_fmt(column))
    else:
        print(_fmt(sort_hand(cards, args.level)))
    return 0


def cmd_deal(args) -> int:
    """随机发牌并展示四家手牌"""
    rng = random.Random(args.seed) if args.seed is not None else None
    table = TableController(level=args.level, rng=rng)
    table.deal()
    for position in PLAY_ORDER:
        player = table.player(position)
        print(f"{position.value:>5} ({player.hand_size}): {_fmt(player.hand)}")
    return 0


def _log_level(text: str) -> str:
    name = text.upper()
    if not isinstance(logging.getLevelName(name), int):
        raise argparse.ArgumentTypeError(f"未知日志级别: {text!r}")
    return name


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="掼蛋教学辅助：牌型识别与压牌判定")
    parser.add_argument(
        "--level", type=check_level, default=os.getenv("GUANDAN_LEVEL_RANK", "2"),
        help="当前打几 (默认取 GUANDAN_LEVEL_RANK，否则 2)",
    )
    parser.add_argument(
        "--log-level", type=_log_level, default=os.getenv("GUANDAN_LOG_LEVEL", "WARNING"),
        help="日志级别 (默认 WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("classify", help="识别牌型，如 '♠5 ♥5'")
    p.add_argument("cards")
    p.set_defaults(func=cmd_classify)

    p = sub.add_parser("beats", help="判断 cards 能否压过 table")
    p.add_argument("cards")
    p.add_argument("table")
    p.set_defaults(func=cmd_beats)

    p = sub.add_parser("wild", help="列出逢人配的合法替代")
    p.add_argument("cards")
    p.set_defaults(func=cmd_wild)

    p = sub.add_parser("sort", help="理牌")
    p.add_argument("cards")
    p.add_argument("--columns", action="store_true", help="按点数分列")
    p.set_defaults(func=cmd_sort)

    p = sub.add_parser("deal", help="随机发牌")
    p.add_argument("--seed", type=int, default=os.getenv("GUANDAN_SEED"))
    p.set_defaults(func=cmd_deal)
    return parser


def main(argv=None) -> int:
    """命令行入口"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except ValueError as e:
        print(f"输入有误: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
