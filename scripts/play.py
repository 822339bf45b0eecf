#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py                     # 观看一局 AI 对战
    python scripts/play.py --games 10 --seed 7 --quiet
"""
import argparse
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Iterable

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from engine.cards import Card, RANK_TO_STR
from engine.config import RulesConfig
from engine.messages import GameFinished, PlayValidated, RedealRequested, StateChanged
from engine.state import Phase, Role
from agents import Arena, StrategicAgent

logger = logging.getLogger(__name__)

# 牌面显示
CARD_DISPLAY = {**RANK_TO_STR, 16: "小王", 17: "大王"}


def parse_args():
    parser = argparse.ArgumentParser(description="Landlord engine: watch AI games")

    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for dealing and bidding")
    parser.add_argument("--max-redeals", type=int, default=10, help="Redeals allowed per game")
    parser.add_argument("--quiet", action="store_true", help="Only print the summary")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args()


def cards_to_str(cards: Iterable[Card]) -> str:
    """牌列表转字符串"""
    cards = sorted(cards)
    if not cards:
        return "Pass"
    return " ".join(CARD_DISPLAY[card.value] for card in cards)


class GamePrinter:
    """把校验器事件打印成对局过程"""

    def __init__(self):
        self.phase = None

    def __call__(self, event):
        if isinstance(event, PlayValidated):
            print(f"  玩家 {event.player_id} 出牌: {cards_to_str(event.cards)} ({event.combination_type.label})")
        elif isinstance(event, RedealRequested):
            print("  无人叫分，重新发牌")
        elif isinstance(event, GameFinished):
            winner = event.winner.value if event.winner else "unknown"
            print(f"  玩家 {event.player_id} 出完手牌，{winner} 获胜")
        elif isinstance(event, StateChanged):
            if event.round.phase != self.phase and event.round.phase == Phase.PLAYING:
                print(
                    f"  地主: 玩家 {event.bidding.landlord_id} "
                    f"(叫分 {event.bidding.current_bid})，手牌数 {list(event.hand_sizes)}"
                )
            self.phase = event.round.phase


def main():
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = RulesConfig()
    agents = [
        StrategicAgent(
            name=f"AI_{i}",
            config=config,
            seed=None if args.seed is None else args.seed + i,
        )
        for i in range(config.num_players)
    ]
    listeners = [] if args.quiet else [GamePrinter()]
    arena = Arena(
        agents,
        config=config,
        seed=args.seed,
        max_redeals=args.max_redeals,
        listeners=listeners,
    )

    print("=" * 60)
    print("斗地主 AI 对战")
    print("=" * 60)

    wins = Counter()
    for game_idx in range(args.games):
        if not args.quiet:
            print(f"\nGame {game_idx + 1}/{args.games}")
            print("-" * 60)
        result = arena.play_game()
        wins[result.winner] += 1
        if not args.quiet:
            print(f"  步数: {result.length}, 炸弹: {result.bombs}, 重新发牌: {result.redeals}")

    print("\n" + "=" * 60)
    print(f"地主胜: {wins[Role.LANDLORD]}")
    print(f"农民胜: {wins[Role.FARMER]}")
    if wins[None]:
        print(f"流局: {wins[None]}")
    print("=" * 60)


if __name__ == "__main__":
    main()
