"""
Engine Layer - 纯规则逻辑

Modules:
    cards: 牌定义与编码
    combination: 牌型定义
    rules: 牌型识别与大小比较
    generator: 潜在牌型枚举
    state: 游戏状态
    messages: 请求/响应/事件
    validator: 回合状态机
"""
from .cards import (
    Card,
    Rank,
    Suit,
    RANK_TO_STR,
    STR_TO_RANK,
    build_deck,
    rank_counts,
    cards_to_str,
    str_to_values,
    str_to_cards,
)

from .combination import (
    CombinationType,
    Combination,
    MIN_STRAIGHT_LEN,
    MIN_STRAIGHT_PAIR_LEN,
    MIN_PLANE_LEN,
)

from .rules import RuleEngine, classify, can_beat

from .generator import CombinationGenerator, legal_combinations

from .config import RulesConfig

from .errors import RejectReason, DealError

from .state import (
    Phase,
    Role,
    BiddingState,
    RoundState,
    GameState,
)

from .messages import (
    BidRequest,
    PlayCardsRequest,
    PassTurnRequest,
    HintRequest,
    Accepted,
    Rejected,
    PlayValidated,
    StateChanged,
    RedealRequested,
    GameFinished,
)

from .validator import TurnValidator

__all__ = [
    # cards
    "Card",
    "Rank",
    "Suit",
    "RANK_TO_STR",
    "STR_TO_RANK",
    "build_deck",
    "rank_counts",
    "cards_to_str",
    "str_to_values",
    "str_to_cards",
    # combination
    "CombinationType",
    "Combination",
    "MIN_STRAIGHT_LEN",
    "MIN_STRAIGHT_PAIR_LEN",
    "MIN_PLANE_LEN",
    # rules
    "RuleEngine",
    "classify",
    "can_beat",
    # generator
    "CombinationGenerator",
    "legal_combinations",
    # config
    "RulesConfig",
    # errors
    "RejectReason",
    "DealError",
    # state
    "Phase",
    "Role",
    "BiddingState",
    "RoundState",
    "GameState",
    # messages
    "BidRequest",
    "PlayCardsRequest",
    "PassTurnRequest",
    "HintRequest",
    "Accepted",
    "Rejected",
    "PlayValidated",
    "StateChanged",
    "RedealRequested",
    "GameFinished",
    # validator
    "TurnValidator",
]
