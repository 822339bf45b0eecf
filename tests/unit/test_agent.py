"""智能体测试"""
import pytest

from engine.cards import build_deck, str_to_cards
from engine.errors import RejectReason
from engine.messages import BidRequest, PassTurnRequest, PlayCardsRequest, Rejected
from engine.rules import RuleEngine
from engine.state import GameState
from agents.agent import Agent, StrategicAgent


def split_hands(*specs):
    deck = build_deck()
    hands = []
    for spec in specs:
        hand = str_to_cards(spec, deck)
        taken = {card.id for card in hand}
        deck = [card for card in deck if card.id not in taken]
        hands.append(hand)
    return hands


class TestAgentBase:
    """Agent 基类测试"""

    def test_act_not_implemented(self):
        with pytest.raises(NotImplementedError):
            Agent().act(None, 0)


class TestBidding:
    """叫牌启发式测试"""

    def test_strong_hand(self):
        agent = StrategicAgent(seed=0)
        hand = str_to_cards("JQKA2345")
        assert agent.bid_amount(hand, 0) == 1
        assert agent.bid_amount(hand, 2) == 3
        assert agent.bid_amount(hand, 3) == 0

    def test_weak_hand(self):
        agent = StrategicAgent(seed=0)
        hand = str_to_cards("3456789")
        for current in range(3):
            assert agent.bid_amount(hand, current) == 0

    def test_moderate_hand_capped(self):
        agent = StrategicAgent(seed=1)
        hand = str_to_cards("JQK3456")
        for _ in range(20):
            assert agent.bid_amount(hand, 0) in (0, 1)
            assert agent.bid_amount(hand, 1) in (0, 2)
            assert agent.bid_amount(hand, 2) == 0

    def test_seeded(self):
        hand = str_to_cards("JQ34567")
        a = StrategicAgent(seed=42)
        b = StrategicAgent(seed=42)
        assert [a.bid_amount(hand, 0) for _ in range(10)] == [b.bid_amount(hand, 0) for _ in range(10)]

    def test_act_bidding(self):
        deck = build_deck()
        state = GameState.deal([deck[0:17], deck[17:34], deck[34:51]], deck[51:54])
        request = StrategicAgent(seed=0).act(state, 0)
        assert isinstance(request, BidRequest)
        assert request.player_id == 0
        assert 0 <= request.amount <= 3


class TestPlaying:
    """出牌测试"""

    def test_plays_from_hand(self):
        hands = split_hands("3345", "JQ", "K")
        state = GameState.in_play(hands, landlord_id=0)
        request = StrategicAgent().act(state, 0)
        assert isinstance(request, PlayCardsRequest)
        assert set(request.cards) <= {card.id for card in hands[0]}

    def test_passes_when_cannot_beat(self):
        hands = split_hands("2234", "56", "78")
        state = GameState.in_play(hands, landlord_id=0)
        state = state.with_play(0, RuleEngine.classify(hands[0][:2]))
        request = StrategicAgent().act(state, 1)
        assert isinstance(request, PassTurnRequest)


class TestLoopBreaker:
    """重复被拒绝时打破循环"""

    def reject(self, agent, request, times):
        for _ in range(times):
            agent.on_rejected(Rejected(request, RejectReason.CANNOT_BEAT_LAST_PLAY, "rejected"))

    def test_forced_pass(self):
        hands = split_hands("5534", "66", "78")
        state = GameState.in_play(hands, landlord_id=0)
        state = state.with_play(0, RuleEngine.classify(hands[0][:2]))
        agent = StrategicAgent()

        request = agent.act(state, 1)
        assert isinstance(request, PlayCardsRequest)
        self.reject(agent, request, 3)
        assert isinstance(agent.act(state, 1), PassTurnRequest)

    def test_lowest_single_on_lead(self):
        hands = split_hands("3344", "66", "78")
        state = GameState.in_play(hands, landlord_id=0)
        agent = StrategicAgent()

        request = agent.act(state, 0)
        assert len(request.cards) == 2
        self.reject(agent, request, 3)
        forced = agent.act(state, 0)
        assert forced.cards == (min(hands[0]).id,)

    def test_below_threshold(self):
        hands = split_hands("5534", "66", "78")
        state = GameState.in_play(hands, landlord_id=0)
        state = state.with_play(0, RuleEngine.classify(hands[0][:2]))
        agent = StrategicAgent()

        request = agent.act(state, 1)
        self.reject(agent, request, 2)
        assert agent.act(state, 1) == request

    def test_reset_clears(self):
        hands = split_hands("5534", "66", "78")
        state = GameState.in_play(hands, landlord_id=0)
        state = state.with_play(0, RuleEngine.classify(hands[0][:2]))
        agent = StrategicAgent()

        request = agent.act(state, 1)
        self.reject(agent, request, 3)
        agent.reset()
        assert agent.act(state, 1) == request

    def test_bid_rejection_ignored(self):
        agent = StrategicAgent()
        agent.on_rejected(Rejected(BidRequest(0, 1), RejectReason.BID_TOO_LOW, "low"))
        assert agent._invalid == {}
