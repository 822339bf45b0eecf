"""
规则引擎 - 牌型识别、大小比较

所有方法都是纯函数，无状态
"""
from typing import Dict, Iterable, List, Optional
from collections import Counter

from .cards import Card, Rank, is_consecutive, is_run_rank
from .combination import (
    Combination,
    CombinationType,
    MIN_STRAIGHT_LEN,
    MIN_STRAIGHT_PAIR_LEN,
    MIN_PLANE_LEN,
)
from .errors import RejectReason


def _is_run(ranks: List[int]) -> bool:
    """已排序的牌面值是否构成连续序列 (不含 2 和王)"""
    return all(is_run_rank(r) for r in ranks) and is_consecutive(ranks)


class RuleEngine:
    """
    斗地主规则引擎

    提供牌型识别、大小比较功能
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def classify(cards: Iterable[Card]) -> Combination:
        """
        识别牌型

        同一组牌的识别结果是确定的；无法识别的组合返回 INVALID，
        带牌数量不符时不会退化为更小的牌型

        Args:
            cards: 牌 (无序)

        Returns:
            牌型
        """
        cards = tuple(sorted(cards))
        n = len(cards)

        if n == 0:
            return Combination.invalid()

        # 同一张牌不能出现两次
        if len({card.id for card in cards}) != n:
            return Combination.invalid(cards)

        counter: Dict[int, int] = Counter(card.value for card in cards)
        ranks = sorted(counter)
        count_values = sorted(counter.values())

        def make(kind: CombinationType, power: int) -> Combination:
            return Combination(kind=kind, power=power, cards=cards)

        # 王炸
        if n == 2 and set(ranks) == {Rank.BLACK_JOKER, Rank.RED_JOKER}:
            return make(CombinationType.ROCKET, Rank.RED_JOKER)

        # 炸弹 / 四带二
        if 4 in count_values:
            return RuleEngine._classify_four(cards, counter)

        # 单张、对子、三张
        if len(counter) == 1:
            kind = {
                1: CombinationType.SINGLE,
                2: CombinationType.PAIR,
                3: CombinationType.TRIPLE,
            }[n]
            return make(kind, ranks[0])

        # 三带一
        if n == 4 and count_values == [1, 3]:
            triple = next(r for r, c in counter.items() if c == 3)
            return make(CombinationType.TRIPLE_WITH_SINGLE, triple)

        # 三带二
        if n == 5 and count_values == [2, 3]:
            triple = next(r for r, c in counter.items() if c == 3)
            return make(CombinationType.TRIPLE_WITH_PAIR, triple)

        # 顺子: 全是单张且连续
        if n >= MIN_STRAIGHT_LEN and len(counter) == n and _is_run(ranks):
            return make(CombinationType.STRAIGHT, ranks[-1])

        # 连对: 全是对子且连续
        if (len(ranks) >= MIN_STRAIGHT_PAIR_LEN
                and all(c == 2 for c in count_values)
                and _is_run(ranks)):
            return make(CombinationType.STRAIGHT_OF_PAIRS, ranks[-1])

        return RuleEngine._classify_plane(cards, counter)

    @staticmethod
    def _classify_four(cards: tuple, counter: Dict[int, int]) -> Combination:
        """含四张相同牌面的组合: 炸弹、四带二单、四带二对"""
        n = len(cards)
        quads = [r for r, c in counter.items() if c == 4]
        if len(quads) != 1:
            return Combination.invalid(cards)

        quad = quads[0]
        rest = sorted(c for r, c in counter.items() if r != quad)

        if n == 4:
            return Combination(kind=CombinationType.BOMB, power=quad, cards=cards)
        # 翅膀必须是两个不同牌面的单张或两个不同牌面的对子
        if n == 6 and rest == [1, 1]:
            return Combination(kind=CombinationType.FOUR_WITH_TWO_SINGLES, power=quad, cards=cards)
        if n == 8 and rest == [2, 2]:
            return Combination(kind=CombinationType.FOUR_WITH_TWO_PAIRS, power=quad, cards=cards)
        return Combination.invalid(cards)

    @staticmethod
    def _classify_plane(cards: tuple, counter: Dict[int, int]) -> Combination:
        """飞机、飞机带单、飞机带对"""
        n = len(cards)
        triples = sorted(r for r, c in counter.items() if c == 3)
        length = len(triples)

        if length < MIN_PLANE_LEN or not _is_run(triples):
            return Combination.invalid(cards)

        # 翅膀: 非三张的部分，每个牌面只能用一次
        wings = [c for r, c in counter.items() if c != 3]
        power = triples[-1]

        if n == length * 3:
            return Combination(kind=CombinationType.PLANE, power=power, cards=cards)
        if n == length * 4 and len(wings) == length and all(c == 1 for c in wings):
            return Combination(kind=CombinationType.PLANE_WITH_SINGLES, power=power, cards=cards)
        if n == length * 5 and len(wings) == length and all(c == 2 for c in wings):
            return Combination(kind=CombinationType.PLANE_WITH_PAIRS, power=power, cards=cards)
        return Combination.invalid(cards)

    @staticmethod
    def check_beat(candidate: Combination, reference: Combination) -> Optional[RejectReason]:
        """
        检查 candidate 能否压过 reference

        Args:
            candidate: 要出的牌
            reference: 上家的牌

        Returns:
            None 表示能压过，否则为拒绝原因
        """
        if not candidate.is_valid:
            return RejectReason.INVALID_COMBINATION
        if not reference.is_valid:
            return RejectReason.CANNOT_BEAT_LAST_PLAY

        # 王炸最大，且没有牌能压过王炸
        if reference.kind == CombinationType.ROCKET:
            return RejectReason.CANNOT_BEAT_LAST_PLAY
        if candidate.kind == CombinationType.ROCKET:
            return None

        # 炸弹 vs 炸弹比大小，炸弹 vs 非炸弹直接压
        if candidate.kind == CombinationType.BOMB:
            if reference.kind == CombinationType.BOMB and candidate.power <= reference.power:
                return RejectReason.CANNOT_BEAT_LAST_PLAY
            return None
        if reference.kind == CombinationType.BOMB:
            return RejectReason.CANNOT_BEAT_LAST_PLAY

        # 普通牌型: 类型相同、张数相同、主牌更大
        if candidate.kind != reference.kind:
            return RejectReason.CANNOT_BEAT_LAST_PLAY
        if len(candidate) != len(reference):
            return RejectReason.MUST_MATCH_LENGTH
        if candidate.power <= reference.power:
            return RejectReason.CANNOT_BEAT_LAST_PLAY
        return None

    @staticmethod
    def can_beat(candidate: Combination, reference: Combination) -> bool:
        """candidate 是否能压过 reference"""
        return RuleEngine.check_beat(candidate, reference) is None


classify = RuleEngine.classify
can_beat = RuleEngine.can_beat
