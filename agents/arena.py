"""
对战竞技场

负责发牌并驱动三个智能体通过 TurnValidator 完成对局
"""
from typing import Callable, List, Optional, Sequence, Tuple
from dataclasses import dataclass
from collections import Counter
import logging
import random

from engine.cards import Card, build_deck
from engine.config import RulesConfig
from engine.messages import Event, GameFinished, RedealRequested
from engine.state import GameState, Role
from engine.validator import TurnValidator

from .agent import Agent

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """对局结果"""
    agents: Tuple[str, ...]
    winner: Optional[Role]            # 获胜阵营，None 表示多次流局
    winning_player: Optional[int]
    landlord_id: Optional[int]
    bid: int
    length: int                       # 出牌阶段的动作数 (含过牌)
    bombs: int
    redeals: int
    rejections: int

    @property
    def landlord_agent(self) -> Optional[str]:
        if self.landlord_id is None:
            return None
        return self.agents[self.landlord_id]


def deal_cards(
    rng: random.Random,
    config: Optional[RulesConfig] = None,
) -> Tuple[List[List[Card]], List[Card]]:
    """
    洗牌并发牌

    Args:
        rng: 随机数生成器
        config: 规则配置

    Returns:
        (各玩家手牌, 底牌)
    """
    config = config or RulesConfig()
    deck = build_deck()
    rng.shuffle(deck)

    size = config.hand_size
    hands = [deck[i * size:(i + 1) * size] for i in range(config.num_players)]
    start = config.num_players * size
    bonus = deck[start:start + config.bonus_card_count]
    return hands, bonus


class Arena:
    """
    对战竞技场

    组织智能体之间的对战
    """

    def __init__(
        self,
        agents: Sequence[Agent],
        config: Optional[RulesConfig] = None,
        seed: Optional[int] = None,
        max_redeals: int = 10,
        max_steps: int = 2000,
        listeners: Sequence[Callable[[Event], None]] = (),
    ):
        """
        Args:
            agents: 每个座位一个智能体
            config: 规则配置
            seed: 发牌随机种子
            max_redeals: 连续流局的最大次数
            max_steps: 单局最大请求数
            listeners: 每局都要注册到校验器上的事件监听
        """
        self.config = config or RulesConfig()
        if len(agents) != self.config.num_players:
            raise ValueError(f"Expected {self.config.num_players} agents, got {len(agents)}")
        self.agents = list(agents)
        self.rng = random.Random(seed)
        self.max_redeals = max_redeals
        self.max_steps = max_steps
        self.listeners = list(listeners)
        self.events = Counter()

    def _new_deal(self) -> GameState:
        hands, bonus = deal_cards(self.rng, self.config)
        first = self.rng.randrange(self.config.num_players)
        return GameState.deal(hands, bonus, first_player=first, config=self.config)

    def _count_event(self, event):
        self.events[type(event).__name__] += 1
        if isinstance(event, GameFinished):
            logger.info(f"Game finished: player {event.player_id} went out")
        elif isinstance(event, RedealRequested):
            logger.info("Redeal requested")

    def play_game(self) -> MatchResult:
        """
        进行一局 (流局自动重新发牌)

        Returns:
            对局结果
        """
        for agent in self.agents:
            agent.reset()

        validator = TurnValidator(self._new_deal(), self.config)
        validator.subscribe(self._count_event)
        for listener in self.listeners:
            validator.subscribe(listener)

        redeals = 0
        rejections = 0
        steps = 0

        while True:
            state = validator.state

            if state.round.voided:
                if redeals >= self.max_redeals:
                    logger.warning(f"Giving up after {redeals} redeals")
                    break
                redeals += 1
                validator.reset(self._new_deal())
                continue

            if state.is_finished:
                break

            steps += 1
            if steps > self.max_steps:
                raise RuntimeError(f"Game did not finish within {self.max_steps} requests")

            player_id = state.round.current_player_id
            agent = self.agents[player_id]
            response = validator.handle(agent.act(state, player_id))
            if not response.ok:
                rejections += 1
                agent.on_rejected(response)

        final = validator.state
        winning_player = None
        if final.is_finished and not final.round.voided:
            winning_player = final.round.last_play_owner_id

        return MatchResult(
            agents=tuple(agent.name for agent in self.agents),
            winner=final.round.winner,
            winning_player=winning_player,
            landlord_id=final.landlord_id if not final.round.voided else None,
            bid=final.bidding.current_bid,
            length=len(final.play_history),
            bombs=final.bombs_count,
            redeals=redeals,
            rejections=rejections,
        )

    def play_match(self, n_games: int = 1) -> List[MatchResult]:
        """
        进行多局

        Args:
            n_games: 对局数

        Returns:
            对局结果列表
        """
        results = []
        for game_idx in range(n_games):
            result = self.play_game()
            results.append(result)
            logger.info(
                f"Game {game_idx + 1}/{n_games}: "
                f"{result.winner.value if result.winner else 'voided'} "
                f"(landlord {result.landlord_agent}, {result.length} moves)"
            )
        return results
