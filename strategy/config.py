"""
策略配置

出牌优先级计算用到的常量表
"""
from dataclasses import dataclass, field
from typing import Dict, Tuple

from engine.cards import Rank

from .strength import StrengthTier


def _default_strength_adjustment() -> Dict[StrengthTier, Tuple[int, int]]:
    # 等级 -> (保守时加分, 进攻时加分)
    return {
        StrengthTier.WEAK: (20, 20),
        StrengthTier.MODERATE: (5, 10),
        StrengthTier.STRONG: (-10, 5),
        StrengthTier.ULTRA: (-20, 0),
    }


@dataclass
class StrategyConfig:
    """
    策略配置

    Attributes:
        remaining_buckets: ((剩余张数上限, 每张牌加分), ...)，按顺序匹配；
            都不匹配时属于开局阶段
        opening_single_bonus: 开局阶段打出小单张的加分
        opening_single_below: 小单张的界限 (主牌小于该值)
        strength_adjustment: 强度等级 -> (保守, 进攻) 加分
        long_straight_bonus_cap: 长顺子额外加分上限
        offensive_remaining: 剩余张数不超过该值时进攻
        landlord_offensive_remaining: 地主剩余张数不超过该值时进攻
        farmer_offensive_remaining: 农民剩余张数不超过该值时进攻
    """
    # 剩余张数分段
    remaining_buckets: Tuple[Tuple[int, int], ...] = ((5, 10), (10, 5))

    # 开局阶段
    opening_single_bonus: int = 15
    opening_single_below: int = Rank.EIGHT

    # 强度调整
    strength_adjustment: Dict[StrengthTier, Tuple[int, int]] = field(
        default_factory=_default_strength_adjustment
    )

    # 顺子加分
    long_straight_bonus_cap: int = 5

    # 进攻阈值
    offensive_remaining: int = 5
    landlord_offensive_remaining: int = 10
    farmer_offensive_remaining: int = 8

    @classmethod
    def from_dict(cls, d: dict) -> 'StrategyConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)
