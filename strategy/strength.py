"""
牌型强度分级

WEAK < MODERATE < STRONG < ULTRA，弱牌优先打出，强牌保留
"""
from enum import IntEnum
from typing import Dict, Tuple

from engine.cards import Rank
from engine.combination import Combination, CombinationType


class StrengthTier(IntEnum):
    """组合强度等级"""
    WEAK = 1      # 弱势组合 - 优先打出
    MODERATE = 2  # 中等组合 - 谨慎使用
    STRONG = 3    # 强势组合 - 保留
    ULTRA = 4     # 超强组合 - 紧急情况才用


# 与主牌大小无关的牌型强度
TYPE_BASE_STRENGTH: Dict[CombinationType, StrengthTier] = {
    CombinationType.BOMB: StrengthTier.ULTRA,
    CombinationType.ROCKET: StrengthTier.ULTRA,
    CombinationType.PLANE: StrengthTier.STRONG,
    CombinationType.PLANE_WITH_SINGLES: StrengthTier.STRONG,
    CombinationType.PLANE_WITH_PAIRS: StrengthTier.STRONG,
    CombinationType.FOUR_WITH_TWO_SINGLES: StrengthTier.STRONG,
    CombinationType.FOUR_WITH_TWO_PAIRS: StrengthTier.STRONG,
    CombinationType.STRAIGHT_OF_PAIRS: StrengthTier.MODERATE,
}

# 按主牌大小分级: ((最小主牌, 等级), ...)，从高到低匹配
POWER_THRESHOLDS: Dict[CombinationType, Tuple[Tuple[int, StrengthTier], ...]] = {
    CombinationType.SINGLE: (
        (Rank.TWO, StrengthTier.ULTRA),
        (Rank.ACE, StrengthTier.STRONG),
        (Rank.QUEEN, StrengthTier.MODERATE),
    ),
    CombinationType.PAIR: (
        (Rank.ACE, StrengthTier.STRONG),
        (Rank.QUEEN, StrengthTier.MODERATE),
    ),
    CombinationType.TRIPLE_WITH_SINGLE: (
        (Rank.ACE, StrengthTier.STRONG),
        (Rank.JACK, StrengthTier.MODERATE),
    ),
    CombinationType.TRIPLE_WITH_PAIR: (
        (Rank.ACE, StrengthTier.STRONG),
        (Rank.JACK, StrengthTier.MODERATE),
    ),
}

# 顺子达到该张数算长顺子
LONG_STRAIGHT_LEN = 7


def evaluate_strength(combo: Combination) -> StrengthTier:
    """
    评估牌型的强度等级

    Args:
        combo: 牌型

    Returns:
        强度等级
    """
    if combo.kind in TYPE_BASE_STRENGTH:
        return TYPE_BASE_STRENGTH[combo.kind]

    if combo.kind == CombinationType.STRAIGHT:
        return StrengthTier.MODERATE if len(combo) >= LONG_STRAIGHT_LEN else StrengthTier.WEAK

    for min_power, tier in POWER_THRESHOLDS.get(combo.kind, ()):
        if combo.power >= min_power:
            return tier
    return StrengthTier.WEAK
