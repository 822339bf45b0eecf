"""
Strategy Layer - 策略出牌

Modules:
    strength: 牌型强度分级
    config: 策略常量表
    recommender: 策略出牌推荐 (AI 与提示共用)
    hint: 出牌提示服务
"""
from .strength import StrengthTier, evaluate_strength
from .config import StrategyConfig
from .recommender import HandPotential, Recommendation, StrategicRecommender
from .hint import HintResult, HintService

__all__ = [
    "StrengthTier",
    "evaluate_strength",
    "StrategyConfig",
    "HandPotential",
    "Recommendation",
    "StrategicRecommender",
    "HintResult",
    "HintService",
]
