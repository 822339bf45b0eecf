"""
智能体

智能体只读取状态快照并提交请求，由 TurnValidator 决定是否接受
"""
from typing import Dict, Optional, Sequence, Tuple
import logging
import random

from engine.cards import Card, Rank
from engine.config import RulesConfig
from engine.messages import (
    BidRequest,
    PassTurnRequest,
    PlayCardsRequest,
    Rejected,
    Request,
)
from engine.state import GameState, Phase
from strategy.recommender import StrategicRecommender

logger = logging.getLogger(__name__)


class Agent:
    """智能体基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def act(self, state: GameState, player_id: int) -> Request:
        """选择动作"""
        raise NotImplementedError

    def on_rejected(self, rejected: Rejected):
        """请求被拒绝时的回调"""
        pass

    def reset(self):
        """重置状态"""
        pass


class StrategicAgent(Agent):
    """
    策略智能体

    叫牌看大牌数量，出牌使用与提示功能相同的 StrategicRecommender
    """

    def __init__(
        self,
        name: str = "strategic",
        recommender: Optional[StrategicRecommender] = None,
        config: Optional[RulesConfig] = None,
        seed: Optional[int] = None,
        max_invalid_attempts: int = 3,
    ):
        """
        Args:
            name: 名称
            recommender: 出牌策略
            config: 规则配置
            seed: 叫牌随机种子
            max_invalid_attempts: 同一手牌被拒绝多少次后强制改变动作
        """
        super().__init__(name)
        self.recommender = recommender or StrategicRecommender()
        self.config = config or RulesConfig()
        self.max_invalid_attempts = max_invalid_attempts
        self._seed = seed
        self._rng = random.Random(seed)
        # player_id -> (牌 id, 被拒次数)
        self._invalid: Dict[int, Tuple[Tuple[int, ...], int]] = {}

    def reset(self):
        self._rng = random.Random(self._seed)
        self._invalid.clear()

    def act(self, state: GameState, player_id: int) -> Request:
        if state.phase == Phase.BIDDING:
            amount = self.bid_amount(state.hand(player_id), state.bidding.current_bid)
            return BidRequest(player_id=player_id, amount=amount)
        return self._play(state, player_id)

    def bid_amount(self, hand: Sequence[Card], current_bid: int) -> int:
        """
        根据大牌 (J 及以上) 数量决定叫分

        Args:
            hand: 手牌
            current_bid: 当前最高叫分

        Returns:
            叫分，0 表示不叫
        """
        max_bid = self.config.max_bid
        high_cards = sum(1 for card in hand if card.value >= Rank.JACK)

        amount = 0
        if high_cards >= 5:
            amount = min(max_bid, current_bid + 1)
        elif high_cards >= 3 and self._rng.random() > 0.5:
            amount = min(max_bid - 1, current_bid + 1)
        elif high_cards >= 2 and self._rng.random() > 0.7:
            amount = min(max_bid - 2, current_bid + 1)

        return amount if amount > current_bid else 0

    def on_rejected(self, rejected: Rejected):
        request = rejected.request
        if not isinstance(request, PlayCardsRequest):
            return
        cards = tuple(sorted(request.cards))
        previous = self._invalid.get(request.player_id)
        attempts = previous[1] + 1 if previous and previous[0] == cards else 1
        self._invalid[request.player_id] = (cards, attempts)
        logger.info(
            f"{self.name}: player {request.player_id} invalid play attempt {attempts}: "
            f"{rejected.reason.value}"
        )

    def _play(self, state: GameState, player_id: int) -> Request:
        round_state = state.round
        can_pass = round_state.last_play is not None and round_state.last_play_owner_id != player_id

        recommendation = self.recommender.recommend_for(state, player_id)
        if recommendation is None:
            return PassTurnRequest(player_id=player_id)

        cards = tuple(sorted(card.id for card in recommendation.combination.cards))

        # 同一手牌反复被拒绝时打破循环
        previous = self._invalid.get(player_id)
        if previous and previous[0] == cards and previous[1] >= self.max_invalid_attempts:
            del self._invalid[player_id]
            logger.info(f"{self.name}: player {player_id} forced to change move after repeated rejections")
            if can_pass:
                return PassTurnRequest(player_id=player_id)
            lowest = min(state.hand(player_id))
            return PlayCardsRequest(player_id=player_id, cards=(lowest.id,))

        logger.debug(f"{self.name}: player {player_id} plays {recommendation.reason}")
        return PlayCardsRequest(player_id=player_id, cards=cards)
