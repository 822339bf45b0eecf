"""出牌提示测试"""
import pytest

from engine.cards import build_deck, str_to_cards
from engine.messages import HintRequest, PlayCardsRequest
from engine.state import GameState
from engine.validator import TurnValidator
from strategy.hint import HintService, MAX_PRESERVED_SHOWN


def split_hands(*specs):
    deck = build_deck()
    hands = []
    for spec in specs:
        hand = str_to_cards(spec, deck)
        taken = {card.id for card in hand}
        deck = [card for card in deck if card.id not in taken]
        hands.append(hand)
    return hands


class TestHintService:
    """HintService 测试"""

    def test_bidding_phase(self):
        deck = build_deck()
        state = GameState.deal([deck[0:17], deck[17:34], deck[34:51]], deck[51:54])
        service = HintService(TurnValidator(state))
        result = service.hint(HintRequest(player_id=0))
        assert result.combination is None
        assert result.rationale == "Hints only available during playing phase"

    def test_not_your_turn(self):
        hands = split_hands("3456", "789", "JQ")
        service = HintService(TurnValidator(GameState.in_play(hands, landlord_id=0)))
        result = service.hint(HintRequest(player_id=1))
        assert result.combination is None
        assert result.rationale == "Hints only available during your turn"

    def test_suggest_play(self):
        hands = split_hands("3AA22XD", "789", "JQ")
        validator = TurnValidator(GameState.in_play(hands, landlord_id=0))
        before = validator.state
        result = HintService(validator).hint(HintRequest(player_id=0))

        assert result.combination is not None
        assert set(result.card_ids) <= {card.id for card in before.hand(0)}
        assert result.strength is not None
        assert result.rationale.startswith("Recommend playing")
        assert len(result.preserved) <= MAX_PRESERVED_SHOWN
        assert result.potential is not None
        assert result.potential.potential_score > 0
        # 提示不修改状态
        assert validator.state is before

    def test_suggest_pass(self):
        hands = split_hands("2234", "56", "78")
        validator = TurnValidator(GameState.in_play(hands, landlord_id=0))
        validator.handle(PlayCardsRequest(
            player_id=0,
            cards=tuple(card.id for card in hands[0][:2]),
        ))
        result = HintService(validator).hint(HintRequest(player_id=1))
        assert result.combination is None
        assert result.card_ids == ()
        assert result.rationale == "Consider passing (no cards can beat last play)"
        assert result.potential is not None

    def test_hint_matches_agent_choice(self):
        hands = split_hands("3345679", "JQ", "K")
        validator = TurnValidator(GameState.in_play(hands, landlord_id=0))
        service = HintService(validator)
        first = service.hint(HintRequest(player_id=0))
        second = service.hint(HintRequest(player_id=0))
        assert first.card_ids == second.card_ids
        rec = service.recommender.recommend_for(validator.state, 0)
        assert first.combination == rec.combination
