"""
出牌提示

只读地查询 TurnValidator 的当前状态，用与 AI 相同的策略给出建议
"""
from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from engine.combination import Combination
from engine.messages import HintRequest
from engine.state import Phase
from engine.validator import TurnValidator

from .recommender import HandPotential, StrategicRecommender
from .strength import StrengthTier

logger = logging.getLogger(__name__)

# 提示中最多展示的保留组合数
MAX_PRESERVED_SHOWN = 3


@dataclass(frozen=True)
class HintResult:
    """
    提示结果

    Attributes:
        player_id: 请求提示的玩家
        combination: 建议出的牌，None 表示建议过牌或无法提示
        rationale: 说明
        strength: 建议牌型的强度等级
        preserved: 出牌后保留的强力组合
        potential: 手牌潜力分析
    """
    player_id: int
    combination: Optional[Combination]
    rationale: str
    strength: Optional[StrengthTier] = None
    preserved: Tuple[Combination, ...] = ()
    potential: Optional[HandPotential] = None

    @property
    def card_ids(self) -> Tuple[int, ...]:
        if self.combination is None:
            return ()
        return tuple(card.id for card in self.combination.cards)


class HintService:
    """提示服务"""

    def __init__(self, validator: TurnValidator, recommender: Optional[StrategicRecommender] = None):
        self.validator = validator
        self.recommender = recommender or StrategicRecommender()

    def hint(self, request: HintRequest) -> HintResult:
        """
        处理提示请求

        Args:
            request: 提示请求

        Returns:
            提示结果 (不修改任何状态)
        """
        state = self.validator.state
        player_id = request.player_id

        if state.phase != Phase.PLAYING:
            return HintResult(player_id, None, "Hints only available during playing phase")
        if state.round.current_player_id != player_id:
            return HintResult(player_id, None, "Hints only available during your turn")

        hand = state.hand(player_id)
        potential = self.recommender.analyze_hand_potential(self.recommender.potential_set(hand))
        logger.debug(
            f"Hint for player {player_id}: potential score {potential.potential_score}, "
            f"{len(potential.strong_combinations)} strong combinations"
        )

        recommendation = self.recommender.recommend_for(state, player_id)
        if recommendation is None:
            return HintResult(
                player_id,
                None,
                "Consider passing (no cards can beat last play)",
                potential=potential,
            )

        return HintResult(
            player_id=player_id,
            combination=recommendation.combination,
            rationale=recommendation.reason,
            strength=recommendation.strength,
            preserved=recommendation.preserved[:MAX_PRESERVED_SHOWN],
            potential=potential,
        )
