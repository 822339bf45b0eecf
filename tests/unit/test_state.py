"""游戏状态测试"""
import pytest

from engine.cards import build_deck, str_to_cards
from engine.config import RulesConfig
from engine.errors import DealError
from engine.rules import RuleEngine
from engine.state import BiddingState, GameState, Phase, Role


def standard_deal():
    deck = build_deck()
    return [deck[0:17], deck[17:34], deck[34:51]], deck[51:54]


def split_hands(*specs):
    """从同一副牌中依次取出多手不重复的牌"""
    deck = build_deck()
    hands = []
    for spec in specs:
        hand = str_to_cards(spec, deck)
        taken = {card.id for card in hand}
        deck = [card for card in deck if card.id not in taken]
        hands.append(hand)
    return hands


class TestPhaseRole:
    """枚举测试"""

    def test_phases(self):
        assert Phase.BIDDING.value == "bidding"
        assert Phase.PLAYING.value == "playing"
        assert Phase.FINISHED.value == "finished"

    def test_roles(self):
        assert Role.LANDLORD.value == "landlord"
        assert Role.FARMER.value == "farmer"


class TestDeal:
    """发牌测试"""

    def test_initial_state(self):
        hands, bonus = standard_deal()
        state = GameState.deal(hands, bonus, first_player=1)
        assert state.phase == Phase.BIDDING
        assert state.round.current_player_id == 1
        assert state.hand_sizes == (17, 17, 17)
        assert len(state.bonus_cards) == 3
        assert state.bidding == BiddingState()

    def test_wrong_hand_count(self):
        hands, bonus = standard_deal()
        with pytest.raises(DealError):
            GameState.deal(hands[:2], bonus)

    def test_wrong_bonus_count(self):
        hands, bonus = standard_deal()
        with pytest.raises(DealError):
            GameState.deal(hands, bonus[:2])

    def test_duplicate_card(self):
        hands, bonus = standard_deal()
        bonus = [hands[0][0]] + list(bonus[1:])
        with pytest.raises(DealError):
            GameState.deal(hands, bonus)

    def test_invalid_first_player(self):
        hands, bonus = standard_deal()
        with pytest.raises(DealError):
            GameState.deal(hands, bonus, first_player=3)

    def test_deal_error_is_value_error(self):
        with pytest.raises(ValueError):
            GameState.deal([], [])

    def test_hands_sorted(self):
        hands, bonus = standard_deal()
        hands[0] = list(reversed(hands[0]))
        state = GameState.deal(hands, bonus)
        assert list(state.hand(0)) == sorted(state.hand(0))

    def test_custom_config(self):
        deck = build_deck()
        config = RulesConfig(num_players=2, bonus_card_count=0)
        state = GameState.deal([deck[:5], deck[5:10]], [], config=config)
        assert state.num_players == 2


class TestBidding:
    """叫牌状态转移测试"""

    def test_bid_advances(self):
        state = GameState.deal(*standard_deal())
        state = state.with_bid(0, 1, max_bid=3)
        assert state.phase == Phase.BIDDING
        assert state.bidding.current_bid == 1
        assert state.bidding.landlord_id == 0
        assert state.round.current_player_id == 1

    def test_max_bid_ends_immediately(self):
        state = GameState.deal(*standard_deal())
        state = state.with_bid(0, 3, max_bid=3)
        assert state.phase == Phase.PLAYING
        assert state.landlord_id == 0
        assert state.round.current_player_id == 0
        assert state.hand_sizes == (20, 17, 17)

    def test_highest_bidder_wins(self):
        state = GameState.deal(*standard_deal())
        state = state.with_bid(0, 1, 3).with_bid(1, 2, 3).with_bid(2, 0, 3)
        assert state.phase == Phase.PLAYING
        assert state.landlord_id == 1
        assert state.bidding.current_bid == 2
        assert state.round.current_player_id == 1
        assert state.role_of(1) == Role.LANDLORD
        assert state.role_of(0) == Role.FARMER

    def test_landlord_gets_bonus_cards(self):
        hands, bonus = standard_deal()
        state = GameState.deal(hands, bonus).with_bid(0, 3, 3)
        hand_ids = {card.id for card in state.hand(0)}
        assert {card.id for card in bonus} <= hand_ids

    def test_all_pass_voids(self):
        state = GameState.deal(*standard_deal())
        state = state.with_bid(0, 0, 3).with_bid(1, 0, 3).with_bid(2, 0, 3)
        assert state.is_finished
        assert state.round.voided
        assert state.round.winner is None

    def test_no_role_during_bidding(self):
        state = GameState.deal(*standard_deal())
        assert state.role_of(0) is None

    def test_bid_outside_bidding(self):
        state = GameState.deal(*standard_deal()).with_bid(0, 3, 3)
        with pytest.raises(ValueError):
            state.with_bid(1, 1, 3)

    def test_immutable(self):
        state = GameState.deal(*standard_deal())
        state.with_bid(0, 3, 3)
        assert state.phase == Phase.BIDDING
        assert state.hand_sizes == (17, 17, 17)


class TestPlaying:
    """出牌状态转移测试"""

    def setup_method(self):
        self.hands = split_hands("5578", "66", "99")
        self.state = GameState.in_play(self.hands, landlord_id=0)

    def test_in_play(self):
        assert self.state.phase == Phase.PLAYING
        assert self.state.round.is_free_lead
        assert self.state.round.current_player_id == 0

    def test_play_removes_cards(self):
        combo = RuleEngine.classify(self.hands[0][:2])
        state = self.state.with_play(0, combo)
        assert state.hand_sizes == (2, 2, 2)
        assert state.round.last_play == combo
        assert state.round.last_play_owner_id == 0
        assert state.round.current_player_id == 1
        assert state.play_history == ((0, combo.cards),)

    def test_round_clears_after_all_pass(self):
        combo = RuleEngine.classify(self.hands[0][:2])
        state = self.state.with_play(0, combo).with_pass(1)
        assert state.round.last_play == combo
        assert state.round.pass_count == 1

        state = state.with_pass(2)
        assert state.round.last_play is None
        assert state.round.last_play_owner_id is None
        assert state.round.pass_count == 0
        assert state.round.current_player_id == 0

    def test_pass_recorded_in_history(self):
        combo = RuleEngine.classify(self.hands[0][:2])
        state = self.state.with_play(0, combo).with_pass(1)
        assert state.play_history[-1] == (1, ())

    def test_bomb_counted(self):
        hands = split_hands("3333", "4", "5")
        state = GameState.in_play(hands, landlord_id=0)
        state = state.with_play(0, RuleEngine.classify(hands[0]))
        assert state.bombs_count == 1

    def test_empty_hand_finishes(self):
        hands = split_hands("55", "6", "7")
        state = GameState.in_play(hands, landlord_id=0)
        state = state.with_play(0, RuleEngine.classify(hands[0]))
        assert state.is_finished
        assert state.round.winner == Role.LANDLORD

    def test_farmer_wins(self):
        hands = split_hands("55", "6", "7")
        state = GameState.in_play(hands, landlord_id=1)
        state = state.with_play(1, RuleEngine.classify(hands[1]))
        assert state.round.winner == Role.FARMER

    def test_play_outside_playing(self):
        state = GameState.deal(*standard_deal())
        combo = RuleEngine.classify(state.hand(0)[:1])
        with pytest.raises(ValueError):
            state.with_play(0, combo)

    def test_in_play_duplicate(self):
        card = build_deck()[0]
        with pytest.raises(DealError):
            GameState.in_play([[card], [card], []], landlord_id=0)
