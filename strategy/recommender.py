"""
策略出牌推荐

AI 出牌与玩家提示共用同一套贪心策略:
保留强力组合，优先使用弱势组合，残局时尽量多出牌
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

import numpy as np

from engine.cards import Card
from engine.combination import Combination, CombinationType
from engine.generator import CombinationGenerator, legal_combinations
from engine.state import GameState, Phase, Role

from .config import StrategyConfig
from .strength import StrengthTier, evaluate_strength

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recommendation:
    """
    策略性出牌建议

    Attributes:
        combination: 推荐出的牌
        strength: 强度等级
        priority: 优先级得分
        reason: 推荐理由
        preserved: 出牌后仍保留的中等以上组合 (仅用于说明)
    """
    combination: Combination
    strength: StrengthTier
    priority: int
    reason: str
    preserved: Tuple[Combination, ...]


@dataclass(frozen=True)
class HandPotential:
    """手牌潜力分析"""
    strong_combinations: Tuple[Combination, ...]
    potential_score: int
    suggestions: Tuple[str, ...]


class StrategicRecommender:
    """
    策略出牌管理器

    纯函数式: 不持有也不修改任何游戏状态，相同输入得到相同结果
    """

    def __init__(self, config: Optional[StrategyConfig] = None):
        self.config = config or StrategyConfig()

    def potential_set(self, hand: Iterable[Card]) -> List[Combination]:
        """手牌中所有潜在的牌型 (不管能否压过上家)"""
        return CombinationGenerator(hand).generate_all()

    def should_play_offensively(self, remaining: int, role: Optional[Role]) -> bool:
        """
        是否采取进攻策略

        Args:
            remaining: 剩余手牌数
            role: 阵营

        Returns:
            残局、地主牌少或农民牌少时为 True
        """
        cfg = self.config
        if remaining <= cfg.offensive_remaining:
            return True
        if role == Role.LANDLORD:
            return remaining <= cfg.landlord_offensive_remaining
        return remaining <= cfg.farmer_offensive_remaining

    def priority(self, combo: Combination, remaining: int, want_offensive: bool) -> int:
        """
        计算出牌优先级

        Args:
            combo: 候选牌型
            remaining: 剩余手牌数
            want_offensive: 是否进攻

        Returns:
            优先级得分，越大越优先
        """
        cfg = self.config
        priority = 0

        # 按剩余张数分段: 残局多出牌，开局清小单张
        for max_cards, multiplier in cfg.remaining_buckets:
            if remaining <= max_cards:
                priority += len(combo) * multiplier
                break
        else:
            if combo.kind == CombinationType.SINGLE and combo.power < cfg.opening_single_below:
                priority += cfg.opening_single_bonus

        strength = evaluate_strength(combo)
        defensive, offensive = cfg.strength_adjustment[strength]
        priority += offensive if want_offensive else defensive

        if combo.kind == CombinationType.STRAIGHT:
            priority += min(len(combo) - 4, cfg.long_straight_bonus_cap)

        return priority

    def recommend(
        self,
        hand: Sequence[Card],
        legal: Iterable[Combination],
        remaining_count: int,
        want_offensive: bool = False,
    ) -> Optional[Recommendation]:
        """
        基于贪心算法生成出牌建议

        Args:
            hand: 完整手牌
            legal: 当前可出的牌型
            remaining_count: 剩余手牌数
            want_offensive: 是否进攻 (覆盖默认的保留强牌倾向)

        Returns:
            出牌建议，没有可出的牌时为 None (调用方应过牌)
        """
        hand_ids = {card.id for card in hand}
        candidates = [
            c for c in legal
            if c.is_valid and c.card_ids <= hand_ids
        ]
        if not candidates:
            return None

        scored = [
            (self.priority(c, remaining_count, want_offensive), evaluate_strength(c), c)
            for c in candidates
        ]
        # 优先级高的在前；同优先级先出弱牌；同强度先出小牌
        scored.sort(key=lambda item: (
            -item[0],
            item[1],
            item[2].power,
            len(item[2]),
            tuple(card.id for card in item[2].cards),
        ))
        priority, strength, best = scored[0]

        preserved = self.preserved(self.potential_set(hand), best)
        reason = self._reason(best, strength, remaining_count, preserved)
        logger.debug(f"Recommend {best.description} (priority {priority}, {strength.name})")

        return Recommendation(
            combination=best,
            strength=strength,
            priority=priority,
            reason=reason,
            preserved=tuple(preserved),
        )

    def recommend_for(self, state: GameState, player_id: int) -> Optional[Recommendation]:
        """
        为当前局面的指定玩家生成建议

        自己的牌没人压过 (或桌面为空) 时视为主动出牌

        Args:
            state: 游戏状态
            player_id: 玩家

        Returns:
            出牌建议或 None
        """
        if state.phase != Phase.PLAYING:
            return None

        hand = state.hand(player_id)
        round_state = state.round
        last_play = round_state.last_play
        if round_state.last_play_owner_id == player_id:
            last_play = None

        legal = legal_combinations(hand, last_play)
        remaining = len(hand)
        want_offensive = self.should_play_offensively(remaining, state.role_of(player_id))
        return self.recommend(hand, legal, remaining, want_offensive)

    def preserved(self, potential: Iterable[Combination], played: Combination) -> List[Combination]:
        """打出 played 后仍完整保留的中等以上组合"""
        played_ids = played.card_ids
        return [
            c for c in potential
            if played_ids.isdisjoint(c.card_ids)
            and evaluate_strength(c) >= StrengthTier.MODERATE
        ]

    def analyze_hand_potential(self, potential: Sequence[Combination]) -> HandPotential:
        """
        分析手牌中的潜在强力组合

        潜力分 = Σ 强度等级 × 张数 (中等以上组合)
        """
        strong = [c for c in potential if evaluate_strength(c) >= StrengthTier.MODERATE]
        tiers = np.array([int(evaluate_strength(c)) for c in strong], dtype=np.int64)
        sizes = np.array([len(c) for c in strong], dtype=np.int64)
        score = int(np.dot(tiers, sizes)) if strong else 0

        suggestions = tuple(
            f"Keep {c.description}"
            for c in strong
            if evaluate_strength(c) >= StrengthTier.STRONG
        )
        return HandPotential(
            strong_combinations=tuple(strong),
            potential_score=score,
            suggestions=suggestions,
        )

    def _reason(
        self,
        combo: Combination,
        strength: StrengthTier,
        remaining: int,
        preserved: Sequence[Combination],
    ) -> str:
        reason = f"Recommend playing {combo.description}"

        reason += {
            StrengthTier.WEAK: " (clear weak cards)",
            StrengthTier.MODERATE: " (moderate value cards)",
            StrengthTier.STRONG: " (strong cards, use carefully)",
            StrengthTier.ULTRA: " (critical cards, consider keeping)",
        }[strength]

        buckets = self.config.remaining_buckets
        if remaining <= buckets[0][0]:
            reason += ", end game quickly"
        elif remaining <= buckets[-1][0]:
            reason += ", maintain rhythm"
        else:
            reason += ", clean up hand"

        if preserved:
            kinds = [c.kind.label for c in preserved[:2]]
            reason += f", preserving {', '.join(kinds)}"
        return reason
