"""
牌型生成器

枚举一手牌中所有潜在的牌型组合，以及对上家出牌的合法响应
"""
from typing import Dict, Iterable, List, Optional, Tuple
import itertools

import numpy as np

from .cards import Card, Rank, MAX_RUN_RANK, group_by_rank, rank_counts
from .combination import (
    Combination,
    MIN_STRAIGHT_LEN,
    MIN_STRAIGHT_PAIR_LEN,
    MIN_PLANE_LEN,
)
from .rules import RuleEngine

# 计数向量中可参与连续牌型的列数 (3..A)
RUN_COLUMNS = MAX_RUN_RANK - Rank.THREE + 1


class CombinationGenerator:
    """
    牌型生成器

    同一牌面的多张牌只取 id 最小的若干张作为代表，
    所以结果按牌面 (而非花色) 去重
    """

    def __init__(self, hand_cards: Iterable[Card]):
        """
        Args:
            hand_cards: 手牌
        """
        self.hand = sorted(hand_cards)
        self.groups: Dict[int, List[Card]] = group_by_rank(self.hand)
        self.counts: np.ndarray = rank_counts(self.hand)

    def _take(self, value: int, n: int) -> List[Card]:
        return self.groups[value][:n]

    def _ranks_with(self, n: int) -> List[int]:
        return [v for v, group in self.groups.items() if len(group) >= n]

    def gen_singles(self) -> List[List[Card]]:
        """生成所有单张"""
        return [self._take(v, 1) for v in self._ranks_with(1)]

    def gen_pairs(self) -> List[List[Card]]:
        """生成所有对子"""
        return [self._take(v, 2) for v in self._ranks_with(2)]

    def gen_triples(self) -> List[List[Card]]:
        """生成所有三张"""
        return [self._take(v, 3) for v in self._ranks_with(3)]

    def gen_bombs(self) -> List[List[Card]]:
        """生成所有炸弹 (不含王炸)"""
        return [self._take(v, 4) for v in self._ranks_with(4)]

    def gen_rocket(self) -> List[List[Card]]:
        """生成王炸"""
        if Rank.BLACK_JOKER in self.groups and Rank.RED_JOKER in self.groups:
            return [self._take(Rank.BLACK_JOKER, 1) + self._take(Rank.RED_JOKER, 1)]
        return []

    def gen_triple_single(self) -> List[List[Card]]:
        """生成所有三带一"""
        result = []
        for triple in self.gen_triples():
            for single in self.gen_singles():
                if single[0].value != triple[0].value:
                    result.append(triple + single)
        return result

    def gen_triple_pair(self) -> List[List[Card]]:
        """生成所有三带对"""
        result = []
        for triple in self.gen_triples():
            for pair in self.gen_pairs():
                if pair[0].value != triple[0].value:
                    result.append(triple + pair)
        return result

    def _runs(self, repeat: int, min_len: int) -> List[Tuple[int, ...]]:
        """
        在计数向量上找出所有连续区间

        Args:
            repeat: 每个牌面需要的张数 (1=顺子, 2=连对, 3=飞机)
            min_len: 最小连续长度

        Returns:
            牌面值元组列表，每个元组是一段连续牌面
        """
        eligible = self.counts[:RUN_COLUMNS] >= repeat
        columns = np.flatnonzero(eligible)
        runs = []
        for start in columns:
            end = start
            while end + 1 < RUN_COLUMNS and eligible[end + 1]:
                end += 1
                if end - start + 1 >= min_len:
                    runs.append(tuple(int(c) + Rank.THREE for c in range(start, end + 1)))
        return runs

    def _gen_serial(self, repeat: int, min_len: int) -> List[List[Card]]:
        result = []
        for run in self._runs(repeat, min_len):
            cards = []
            for value in run:
                cards.extend(self._take(value, repeat))
            result.append(cards)
        return result

    def gen_straight(self) -> List[List[Card]]:
        """生成顺子"""
        return self._gen_serial(1, MIN_STRAIGHT_LEN)

    def gen_straight_pair(self) -> List[List[Card]]:
        """生成连对"""
        return self._gen_serial(2, MIN_STRAIGHT_PAIR_LEN)

    def gen_plane(self) -> List[List[Card]]:
        """生成飞机不带"""
        return self._gen_serial(3, MIN_PLANE_LEN)

    def _gen_plane_with(self, wing_size: int) -> List[List[Card]]:
        """飞机带翅膀，翅膀牌面互不相同且不与飞机主体重复"""
        result = []
        for plane in self.gen_plane():
            plane_ranks = {card.value for card in plane}
            length = len(plane_ranks)
            available = [v for v in self._ranks_with(wing_size) if v not in plane_ranks]
            for combo in itertools.combinations(available, length):
                wings = []
                for value in combo:
                    wings.extend(self._take(value, wing_size))
                result.append(plane + wings)
        return result

    def gen_plane_single(self) -> List[List[Card]]:
        """生成飞机带单"""
        return self._gen_plane_with(1)

    def gen_plane_pair(self) -> List[List[Card]]:
        """生成飞机带对"""
        return self._gen_plane_with(2)

    def _gen_four_with(self, wing_size: int) -> List[List[Card]]:
        result = []
        for bomb in self.gen_bombs():
            available = [v for v in self._ranks_with(wing_size) if v != bomb[0].value]
            for combo in itertools.combinations(available, 2):
                wings = []
                for value in combo:
                    wings.extend(self._take(value, wing_size))
                result.append(bomb + wings)
        return result

    def gen_four_single(self) -> List[List[Card]]:
        """生成四带二单"""
        return self._gen_four_with(1)

    def gen_four_pair(self) -> List[List[Card]]:
        """生成四带二对"""
        return self._gen_four_with(2)

    def generate_all(self) -> List[Combination]:
        """
        生成手牌中所有潜在的牌型 (主动出牌时均可出)

        每组候选牌都经过 RuleEngine.classify 识别

        Returns:
            牌型列表，按生成顺序去重
        """
        candidates = itertools.chain(
            self.gen_singles(),
            self.gen_pairs(),
            self.gen_triples(),
            self.gen_bombs(),
            self.gen_rocket(),
            self.gen_triple_single(),
            self.gen_triple_pair(),
            self.gen_straight(),
            self.gen_straight_pair(),
            self.gen_plane(),
            self.gen_plane_single(),
            self.gen_plane_pair(),
            self.gen_four_single(),
            self.gen_four_pair(),
        )

        seen = set()
        combos = []
        for cards in candidates:
            combo = RuleEngine.classify(cards)
            key = tuple(card.id for card in combo.cards)
            if combo.is_valid and key not in seen:
                seen.add(key)
                combos.append(combo)
        return combos

    def generate_responses(self, last_play: Optional[Combination]) -> List[Combination]:
        """
        生成对上家出牌的合法响应 (不含过)

        Args:
            last_play: 上家的出牌，None 表示主动出牌

        Returns:
            能压过上家的牌型列表
        """
        combos = self.generate_all()
        if last_play is None:
            return combos
        return [c for c in combos if RuleEngine.can_beat(c, last_play)]


def legal_combinations(hand: Iterable[Card], last_play: Optional[Combination]) -> List[Combination]:
    """手牌中能出的所有牌型"""
    return CombinationGenerator(hand).generate_responses(last_play)
