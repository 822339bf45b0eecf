"""
牌型定义

斗地主共有 14 种合法牌型，外加 INVALID 表示无法识别的组合
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Iterable, Tuple, FrozenSet

from .cards import Card, RANK_NAMES


class CombinationType(IntEnum):
    """牌型"""
    INVALID = 0               # 非法牌型
    SINGLE = 1                # 单张
    PAIR = 2                  # 对子
    TRIPLE = 3                # 三张
    BOMB = 4                  # 炸弹 (四张相同)
    ROCKET = 5                # 王炸
    TRIPLE_WITH_SINGLE = 6    # 三带一
    TRIPLE_WITH_PAIR = 7      # 三带二
    STRAIGHT = 8              # 顺子 (至少5张)
    STRAIGHT_OF_PAIRS = 9     # 连对 (至少3对)
    PLANE = 10                # 飞机不带 (至少2个三张)
    PLANE_WITH_SINGLES = 11   # 飞机带单
    PLANE_WITH_PAIRS = 12     # 飞机带对
    FOUR_WITH_TWO_SINGLES = 13  # 四带二单
    FOUR_WITH_TWO_PAIRS = 14    # 四带二对

    @property
    def label(self) -> str:
        """事件中使用的名称，如 "triple_with_pair" """
        return self.name.lower()


# 顺子/连对/飞机的最小长度
MIN_STRAIGHT_LEN = 5       # 顺子至少 5 张
MIN_STRAIGHT_PAIR_LEN = 3  # 连对至少 3 对
MIN_PLANE_LEN = 2          # 飞机至少 2 个三张

# 长度可变的牌型 (比较时要求张数相同)
VARIABLE_LENGTH_TYPES: FrozenSet[CombinationType] = frozenset({
    CombinationType.STRAIGHT,
    CombinationType.STRAIGHT_OF_PAIRS,
    CombinationType.PLANE,
    CombinationType.PLANE_WITH_SINGLES,
    CombinationType.PLANE_WITH_PAIRS,
})

PLANE_TYPES: FrozenSet[CombinationType] = frozenset({
    CombinationType.PLANE,
    CombinationType.PLANE_WITH_SINGLES,
    CombinationType.PLANE_WITH_PAIRS,
})

FOUR_WITH_TYPES: FrozenSet[CombinationType] = frozenset({
    CombinationType.FOUR_WITH_TWO_SINGLES,
    CombinationType.FOUR_WITH_TWO_PAIRS,
})

TRIPLE_TYPES: FrozenSet[CombinationType] = frozenset({
    CombinationType.TRIPLE,
    CombinationType.TRIPLE_WITH_SINGLE,
    CombinationType.TRIPLE_WITH_PAIR,
})


@dataclass(frozen=True)
class Combination:
    """
    不可变牌型表示

    只应由 RuleEngine.classify 构造

    Attributes:
        kind: 牌型
        power: 比较用的主牌面值 (带牌牌型取主体部分，不看翅膀)
        cards: 组成牌型的牌 (已排序)
    """
    kind: CombinationType
    power: int
    cards: Tuple[Card, ...]

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> 'Combination':
        """识别牌型并创建组合"""
        from .rules import RuleEngine
        return RuleEngine.classify(cards)

    @classmethod
    def invalid(cls, cards: Iterable[Card] = ()) -> 'Combination':
        return cls(kind=CombinationType.INVALID, power=0, cards=tuple(sorted(cards)))

    @property
    def is_valid(self) -> bool:
        return self.kind != CombinationType.INVALID

    @property
    def is_bomb(self) -> bool:
        return self.kind in (CombinationType.BOMB, CombinationType.ROCKET)

    @property
    def card_ids(self) -> FrozenSet[int]:
        return frozenset(card.id for card in self.cards)

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(card.value for card in self.cards)

    @property
    def description(self) -> str:
        return describe(self)

    def __len__(self) -> int:
        return len(self.cards)


def describe(combo: Combination) -> str:
    """
    生成牌型的可读描述

    Args:
        combo: 牌型

    Returns:
        如 "Pair of 7"、"Straight 3-7"
    """
    kind = combo.kind
    name = RANK_NAMES.get(combo.power, str(combo.power))

    if kind == CombinationType.INVALID:
        return "Invalid combination"
    if kind == CombinationType.ROCKET:
        return "Rocket"
    if kind == CombinationType.BOMB:
        return f"Bomb of {name}"
    if kind == CombinationType.SINGLE:
        return f"Single {name}"
    if kind == CombinationType.PAIR:
        return f"Pair of {name}"
    if kind == CombinationType.TRIPLE:
        return f"Triple {name}"
    if kind == CombinationType.TRIPLE_WITH_SINGLE:
        return f"Triple {name} with single"
    if kind == CombinationType.TRIPLE_WITH_PAIR:
        return f"Triple {name} with pair"
    if kind == CombinationType.FOUR_WITH_TWO_SINGLES:
        return f"Four {name} with two singles"
    if kind == CombinationType.FOUR_WITH_TWO_PAIRS:
        return f"Four {name} with two pairs"

    # 连续牌型: 从最小主牌到最大主牌
    if kind == CombinationType.STRAIGHT:
        low = min(combo.values)
        return f"Straight {RANK_NAMES[low]}-{name}"
    if kind == CombinationType.STRAIGHT_OF_PAIRS:
        low = min(combo.values)
        return f"Straight of pairs {RANK_NAMES[low]}-{name}"

    # 飞机: 主体长度 = 张数 / (3 + 翅膀张数)
    group = {
        CombinationType.PLANE: 3,
        CombinationType.PLANE_WITH_SINGLES: 4,
        CombinationType.PLANE_WITH_PAIRS: 5,
    }[kind]
    length = len(combo) // group
    low = RANK_NAMES[combo.power - length + 1]
    suffix = {
        CombinationType.PLANE: "",
        CombinationType.PLANE_WITH_SINGLES: " with singles",
        CombinationType.PLANE_WITH_PAIRS: " with pairs",
    }[kind]
    return f"Plane {low}-{name}{suffix}"
