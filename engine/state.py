"""
游戏状态定义

使用不可变数据结构:
- 校验失败时旧状态原样保留
- 状态快照可以安全地广播给展示层
- 每次合法请求由 TurnValidator 生成新状态并替换
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Optional, Sequence, Tuple
from enum import Enum

from .cards import Card
from .combination import Combination
from .config import RulesConfig
from .errors import DealError


class Phase(Enum):
    """游戏阶段"""
    BIDDING = "bidding"    # 叫牌阶段
    PLAYING = "playing"    # 出牌阶段
    FINISHED = "finished"  # 游戏结束


class Role(Enum):
    """玩家阵营"""
    LANDLORD = "landlord"
    FARMER = "farmer"


@dataclass(frozen=True)
class BiddingState:
    """
    叫牌状态

    Attributes:
        current_bid: 当前最高叫分
        landlord_id: 当前最高叫分的玩家
        bid_history: 叫牌历史 ((player_id, amount), ...)，0 表示不叫
    """
    current_bid: int = 0
    landlord_id: Optional[int] = None
    bid_history: Tuple[Tuple[int, int], ...] = ()

    def has_bid(self, player_id: int) -> bool:
        return any(pid == player_id for pid, _ in self.bid_history)

    def with_bid(self, player_id: int, amount: int) -> 'BiddingState':
        """记录一次叫牌 (不做合法性检查)"""
        history = self.bid_history + ((player_id, amount),)
        if amount > self.current_bid:
            return BiddingState(current_bid=amount, landlord_id=player_id, bid_history=history)
        return replace(self, bid_history=history)


@dataclass(frozen=True)
class RoundState:
    """
    回合状态

    Attributes:
        phase: 游戏阶段
        current_player_id: 当前行动玩家
        last_play: 桌面上未被压过的牌 (None 表示自由出牌)
        last_play_owner_id: last_play 的出牌者
        pass_count: last_play 之后连续过牌的次数
        winner: 获胜阵营 (游戏结束后)
        voided: 无人叫分导致流局
    """
    phase: Phase
    current_player_id: int
    last_play: Optional[Combination] = None
    last_play_owner_id: Optional[int] = None
    pass_count: int = 0
    winner: Optional[Role] = None
    voided: bool = False

    @property
    def is_free_lead(self) -> bool:
        return self.last_play is None


@dataclass(frozen=True)
class GameState:
    """
    一局游戏的完整状态

    Attributes:
        hands: 各玩家手牌 (按玩家 id 索引，组内已排序)
        bonus_cards: 底牌
        round: 回合状态
        bidding: 叫牌状态
        play_history: 出牌历史 ((player_id, cards), ...)，过牌记为空元组
        bombs_count: 已打出的炸弹/王炸数
    """
    hands: Tuple[Tuple[Card, ...], ...]
    bonus_cards: Tuple[Card, ...]
    round: RoundState
    bidding: BiddingState = field(default_factory=BiddingState)
    play_history: Tuple[Tuple[int, Tuple[Card, ...]], ...] = ()
    bombs_count: int = 0

    @classmethod
    def deal(
        cls,
        hands: Sequence[Iterable[Card]],
        bonus_cards: Iterable[Card],
        first_player: int = 0,
        config: Optional[RulesConfig] = None,
    ) -> 'GameState':
        """
        用已经发好的牌创建叫牌阶段的初始状态

        Args:
            hands: 各玩家手牌
            bonus_cards: 底牌
            first_player: 第一个叫牌的玩家
            config: 规则配置

        Returns:
            初始状态 (叫牌阶段)

        Raises:
            DealError: 玩家数、底牌数不对或有重复的牌
        """
        config = config or RulesConfig()
        hands = tuple(tuple(sorted(hand)) for hand in hands)
        bonus = tuple(sorted(bonus_cards))

        if len(hands) != config.num_players:
            raise DealError(f"Expected {config.num_players} hands, got {len(hands)}")
        if len(bonus) != config.bonus_card_count:
            raise DealError(f"Expected {config.bonus_card_count} bonus cards, got {len(bonus)}")
        if not 0 <= first_player < config.num_players:
            raise DealError(f"Invalid first player: {first_player}")
        _check_unique(hands + (bonus,))

        return cls(
            hands=hands,
            bonus_cards=bonus,
            round=RoundState(phase=Phase.BIDDING, current_player_id=first_player),
        )

    @classmethod
    def in_play(
        cls,
        hands: Sequence[Iterable[Card]],
        landlord_id: int,
        bid: int = 1,
        config: Optional[RulesConfig] = None,
    ) -> 'GameState':
        """
        直接创建出牌阶段的状态 (地主已确定且已拿到底牌)

        Args:
            hands: 各玩家手牌 (地主手牌已含底牌)
            landlord_id: 地主
            bid: 地主叫分

        Raises:
            DealError: 玩家数不对或有重复的牌
        """
        config = config or RulesConfig()
        hands = tuple(tuple(sorted(hand)) for hand in hands)

        if len(hands) != config.num_players:
            raise DealError(f"Expected {config.num_players} hands, got {len(hands)}")
        if not 0 <= landlord_id < config.num_players:
            raise DealError(f"Invalid landlord: {landlord_id}")
        _check_unique(hands)

        return cls(
            hands=hands,
            bonus_cards=(),
            round=RoundState(phase=Phase.PLAYING, current_player_id=landlord_id),
            bidding=BiddingState(
                current_bid=bid,
                landlord_id=landlord_id,
                bid_history=((landlord_id, bid),),
            ),
        )

    @property
    def num_players(self) -> int:
        return len(self.hands)

    @property
    def phase(self) -> Phase:
        return self.round.phase

    @property
    def is_finished(self) -> bool:
        return self.round.phase == Phase.FINISHED

    @property
    def landlord_id(self) -> Optional[int]:
        return self.bidding.landlord_id

    @property
    def hand_sizes(self) -> Tuple[int, ...]:
        return tuple(len(hand) for hand in self.hands)

    def hand(self, player_id: int) -> Tuple[Card, ...]:
        """获取指定玩家的手牌"""
        return self.hands[player_id]

    def hand_index(self, player_id: int) -> Dict[int, Card]:
        """id -> Card 映射"""
        return {card.id: card for card in self.hands[player_id]}

    def role_of(self, player_id: int) -> Optional[Role]:
        """玩家阵营，叫牌结束前为 None"""
        if self.round.phase == Phase.BIDDING or self.bidding.landlord_id is None:
            return None
        return Role.LANDLORD if player_id == self.bidding.landlord_id else Role.FARMER

    def next_player(self, player_id: int) -> int:
        return (player_id + 1) % self.num_players

    def with_bid(self, player_id: int, amount: int, max_bid: int) -> 'GameState':
        """
        叫牌后的新状态

        Args:
            player_id: 叫牌玩家
            amount: 叫分 (0=不叫)
            max_bid: 最高叫分

        Returns:
            新状态
        """
        if self.round.phase != Phase.BIDDING:
            raise ValueError("Not in bidding phase")

        bidding = self.bidding.with_bid(player_id, amount)

        # 叫牌结束条件: 有人叫到最高分，或所有人都叫过
        if amount < max_bid and len(bidding.bid_history) < self.num_players:
            return replace(
                self,
                bidding=bidding,
                round=replace(self.round, current_player_id=self.next_player(player_id)),
            )

        # 流局: 无人叫分
        if bidding.current_bid <= 0:
            return replace(
                self,
                bidding=bidding,
                round=replace(self.round, phase=Phase.FINISHED, voided=True),
            )

        # 地主获得底牌并首先出牌
        landlord = bidding.landlord_id
        hands = list(self.hands)
        hands[landlord] = tuple(sorted(hands[landlord] + self.bonus_cards))

        return replace(
            self,
            hands=tuple(hands),
            bidding=bidding,
            round=RoundState(phase=Phase.PLAYING, current_player_id=landlord),
        )

    def with_play(self, player_id: int, combo: Combination) -> 'GameState':
        """
        出牌后的新状态

        Args:
            player_id: 出牌玩家
            combo: 已识别的牌型

        Returns:
            新状态
        """
        if self.round.phase != Phase.PLAYING:
            raise ValueError("Not in playing phase")

        played = combo.card_ids
        hands = list(self.hands)
        hands[player_id] = tuple(c for c in hands[player_id] if c.id not in played)

        history = self.play_history + ((player_id, combo.cards),)
        bombs_count = self.bombs_count + (1 if combo.is_bomb else 0)

        # 出完牌即结束，赢家为该玩家所在阵营
        if not hands[player_id]:
            round_state = RoundState(
                phase=Phase.FINISHED,
                current_player_id=player_id,
                last_play=combo,
                last_play_owner_id=player_id,
                winner=self.role_of(player_id),
            )
        else:
            round_state = RoundState(
                phase=Phase.PLAYING,
                current_player_id=self.next_player(player_id),
                last_play=combo,
                last_play_owner_id=player_id,
            )

        return replace(
            self,
            hands=tuple(hands),
            round=round_state,
            play_history=history,
            bombs_count=bombs_count,
        )

    def with_pass(self, player_id: int) -> 'GameState':
        """
        过牌后的新状态

        其他玩家都过牌且轮回到 last_play 的出牌者时清空桌面

        Args:
            player_id: 过牌玩家

        Returns:
            新状态
        """
        if self.round.phase != Phase.PLAYING:
            raise ValueError("Not in playing phase")

        pass_count = self.round.pass_count + 1
        next_player = self.next_player(player_id)
        round_state = replace(self.round, current_player_id=next_player, pass_count=pass_count)

        if pass_count >= self.num_players - 1 and next_player == self.round.last_play_owner_id:
            round_state = RoundState(phase=Phase.PLAYING, current_player_id=next_player)

        return replace(
            self,
            round=round_state,
            play_history=self.play_history + ((player_id, ()),),
        )


def _check_unique(groups: Sequence[Tuple[Card, ...]]):
    seen = set()
    for group in groups:
        for card in group:
            if card.id in seen:
                raise DealError(f"Card id {card.id} dealt more than once")
            seen.add(card.id)
