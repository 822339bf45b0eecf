"""
回合校验器 - 叫牌/出牌/过牌的状态机

状态: BIDDING -> PLAYING -> FINISHED

所有请求同步处理，一次一个；被拒绝的请求不修改状态，也不会自动重试
"""
from typing import Callable, List, Optional
import logging

from .combination import Combination
from .config import RulesConfig
from .errors import RejectReason
from .messages import (
    Accepted,
    BidRequest,
    Event,
    GameFinished,
    PassTurnRequest,
    PlayCardsRequest,
    PlayValidated,
    RedealRequested,
    Rejected,
    Request,
    Response,
    StateChanged,
)
from .rules import RuleEngine
from .state import GameState, Phase

logger = logging.getLogger(__name__)

Listener = Callable[[Event], None]

# 拒绝原因的默认说明
REJECT_MESSAGES = {
    RejectReason.INVALID_COMBINATION: "Invalid card combination",
    RejectReason.NOT_YOUR_TURN: "It is not your turn",
    RejectReason.CARDS_NOT_OWNED: "You do not have all these cards in your hand",
    RejectReason.CANNOT_BEAT_LAST_PLAY: "Cannot beat the last play",
    RejectReason.MUST_MATCH_LENGTH: "Must play the same number of cards as the last play",
    RejectReason.ALREADY_BID: "You have already bid",
    RejectReason.BID_TOO_LOW: "Bid must be higher than the current bid",
    RejectReason.ILLEGAL_PASS: "You cannot pass when you are leading",
    RejectReason.INVALID_BID: "Bid amount out of range",
    RejectReason.WRONG_PHASE: "Request not accepted in the current phase",
}


class TurnValidator:
    """
    回合校验器

    独占持有 GameState；只有校验通过的请求才会替换状态。
    外部通过 state 属性读取不可变快照，通过 subscribe 接收事件
    """

    def __init__(self, state: GameState, config: Optional[RulesConfig] = None):
        """
        Args:
            state: 已发好牌的初始状态
            config: 规则配置
        """
        self.config = config or RulesConfig()
        self._state = state
        self._listeners: List[Listener] = []

    @property
    def state(self) -> GameState:
        return self._state

    def subscribe(self, listener: Listener):
        """注册事件监听"""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        self._listeners.remove(listener)

    def reset(self, state: GameState):
        """换上一副新发的牌"""
        self._state = state
        logger.info(f"New deal installed, player {state.round.current_player_id} to act")
        self._emit(self._state_changed())

    def handle(self, request: Request) -> Response:
        """
        处理一个请求

        Args:
            request: BidRequest / PlayCardsRequest / PassTurnRequest

        Returns:
            Accepted 或 Rejected
        """
        if isinstance(request, BidRequest):
            return self.bid(request)
        if isinstance(request, PlayCardsRequest):
            return self.play(request)
        if isinstance(request, PassTurnRequest):
            return self.pass_turn(request)
        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    # ---- 叫牌 ----

    def bid(self, request: BidRequest) -> Response:
        """处理叫牌请求"""
        rejection = self._check_turn(request, Phase.BIDDING)
        if rejection:
            return rejection

        bidding = self._state.bidding
        if bidding.has_bid(request.player_id):
            return self._reject(request, RejectReason.ALREADY_BID)
        if not 0 <= request.amount <= self.config.max_bid:
            return self._reject(
                request, RejectReason.INVALID_BID,
                f"Bid must be between 0 and {self.config.max_bid}",
            )
        if 0 < request.amount <= bidding.current_bid:
            return self._reject(
                request, RejectReason.BID_TOO_LOW,
                f"Bid {request.amount} must be higher than current bid {bidding.current_bid}",
            )

        new_state = self._state.with_bid(request.player_id, request.amount, self.config.max_bid)
        events: List[Event] = []

        if new_state.round.voided:
            logger.info("Everyone passed, deal voided; redeal requested")
            events.append(RedealRequested(bid_history=new_state.bidding.bid_history))
        elif new_state.phase == Phase.PLAYING:
            logger.info(
                f"Bidding finished: player {new_state.landlord_id} is landlord "
                f"with bid {new_state.bidding.current_bid}"
            )
        else:
            logger.debug(f"Player {request.player_id} bid {request.amount}")

        return self._accept(request, new_state, events)

    # ---- 出牌 ----

    def play(self, request: PlayCardsRequest) -> Response:
        """处理出牌请求"""
        rejection = self._check_turn(request, Phase.PLAYING)
        if rejection:
            return rejection

        card_ids = tuple(request.cards)
        if not card_ids or len(set(card_ids)) != len(card_ids):
            return self._reject(request, RejectReason.INVALID_COMBINATION)

        hand = self._state.hand_index(request.player_id)
        if any(card_id not in hand for card_id in card_ids):
            return self._reject(request, RejectReason.CARDS_NOT_OWNED)

        combo = RuleEngine.classify(hand[card_id] for card_id in card_ids)
        if not combo.is_valid:
            return self._reject(request, RejectReason.INVALID_COMBINATION)

        round_state = self._state.round
        if round_state.last_play is not None and round_state.last_play_owner_id != request.player_id:
            reason = RuleEngine.check_beat(combo, round_state.last_play)
            if reason is not None:
                return self._reject(request, reason, _beat_message(reason, round_state.last_play))

        new_state = self._state.with_play(request.player_id, combo)
        events: List[Event] = [
            PlayValidated(
                player_id=request.player_id,
                cards=combo.cards,
                combination_type=combo.kind,
            )
        ]
        logger.debug(f"Player {request.player_id} played {combo.description}")

        if new_state.is_finished:
            winner = new_state.round.winner
            logger.info(
                f"Player {request.player_id} played out all cards, "
                f"{winner.value if winner else 'nobody'} wins"
            )
            events.append(GameFinished(player_id=request.player_id, winner=winner))

        return self._accept(request, new_state, events)

    # ---- 过牌 ----

    def pass_turn(self, request: PassTurnRequest) -> Response:
        """处理过牌请求"""
        rejection = self._check_turn(request, Phase.PLAYING)
        if rejection:
            return rejection

        round_state = self._state.round
        if round_state.last_play is None or round_state.last_play_owner_id == request.player_id:
            return self._reject(request, RejectReason.ILLEGAL_PASS)

        new_state = self._state.with_pass(request.player_id)
        if new_state.round.last_play is None:
            logger.info(
                f"Trick cleared, player {new_state.round.current_player_id} leads"
            )
        return self._accept(request, new_state, [])

    # ---- 内部 ----

    def _check_turn(self, request: Request, phase: Phase) -> Optional[Rejected]:
        if self._state.round.phase != phase:
            return self._reject(
                request, RejectReason.WRONG_PHASE,
                f"{type(request).__name__} not accepted during {self._state.round.phase.value}",
            )
        if request.player_id != self._state.round.current_player_id:
            return self._reject(request, RejectReason.NOT_YOUR_TURN)
        return None

    def _reject(self, request: Request, reason: RejectReason, message: Optional[str] = None) -> Rejected:
        rejected = Rejected(
            request=request,
            reason=reason,
            message=message or REJECT_MESSAGES[reason],
        )
        logger.info(
            f"Rejected {type(request).__name__} from player {request.player_id}: "
            f"{reason.value} ({rejected.message})"
        )
        self._emit(rejected)
        return rejected

    def _accept(self, request: Request, new_state: GameState, events: List[Event]) -> Accepted:
        self._state = new_state
        for event in events:
            self._emit(event)
        self._emit(self._state_changed())
        return Accepted(request=request)

    def _state_changed(self) -> StateChanged:
        return StateChanged(
            round=self._state.round,
            bidding=self._state.bidding,
            hand_sizes=self._state.hand_sizes,
        )

    def _emit(self, event: Event):
        for listener in list(self._listeners):
            listener(event)


def _beat_message(reason: RejectReason, last_play: Combination) -> str:
    if reason == RejectReason.MUST_MATCH_LENGTH:
        return f"Must play {len(last_play)} cards to match {last_play.description}"
    return f"Cannot beat {last_play.description}"
