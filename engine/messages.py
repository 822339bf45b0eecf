"""
请求、响应与事件

请求/响应是封闭的 dataclass 集合，由 TurnValidator.handle 按类型分派
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .cards import Card
from .combination import CombinationType
from .errors import RejectReason
from .state import BiddingState, Role, RoundState


# ---- 请求 ----

@dataclass(frozen=True)
class BidRequest:
    """叫牌请求，amount=0 表示不叫"""
    player_id: int
    amount: int


@dataclass(frozen=True)
class PlayCardsRequest:
    """出牌请求，cards 为牌的 id"""
    player_id: int
    cards: Tuple[int, ...]


@dataclass(frozen=True)
class PassTurnRequest:
    """过牌请求"""
    player_id: int


@dataclass(frozen=True)
class HintRequest:
    """提示请求 (只读，由 HintService 处理)"""
    player_id: int


Request = Union[BidRequest, PlayCardsRequest, PassTurnRequest]


# ---- 响应 ----

@dataclass(frozen=True)
class Accepted:
    """请求已被接受"""
    request: Request

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """
    请求被拒绝，状态未改变

    Attributes:
        request: 原请求
        reason: 拒绝原因
        message: 可读说明
    """
    request: Request
    reason: RejectReason
    message: str

    @property
    def ok(self) -> bool:
        return False

    @property
    def player_id(self) -> int:
        return self.request.player_id


Response = Union[Accepted, Rejected]


# ---- 事件 ----

@dataclass(frozen=True)
class PlayValidated:
    """出牌通过校验"""
    player_id: int
    cards: Tuple[Card, ...]
    combination_type: CombinationType


@dataclass(frozen=True)
class StateChanged:
    """每次状态变更后广播"""
    round: RoundState
    bidding: BiddingState
    hand_sizes: Tuple[int, ...]


@dataclass(frozen=True)
class RedealRequested:
    """无人叫分，需要重新发牌"""
    bid_history: Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class GameFinished:
    """有玩家出完牌"""
    player_id: int
    winner: Optional[Role]


Event = Union[PlayValidated, StateChanged, Rejected, RedealRequested, GameFinished]
