"""
牌的定义与编码

斗地主使用 54 张牌：
- 3-10, J, Q, K, A, 2 各 4 张 (黑桃/红心/方块/梅花)
- 小王、大王各 1 张

每张牌有唯一 id，牌面值 (value) 全序: 3 < 4 < ... < A < 2 < 小王 < 大王
"""
from enum import Enum, IntEnum
from dataclasses import dataclass
from typing import List, Tuple, Dict, Iterable, Optional
from collections import Counter
import numpy as np


class Rank(IntEnum):
    """牌面值定义"""
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14
    TWO = 15
    BLACK_JOKER = 16
    RED_JOKER = 17


class Suit(Enum):
    """花色"""
    SPADES = "spades"
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    JOKER = "joker"


# 普通花色 (发牌顺序)
PLAIN_SUITS: Tuple[Suit, ...] = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)

# 牌面值到显示字符的映射
RANK_TO_STR: Dict[int, str] = {
    3: '3', 4: '4', 5: '5', 6: '6', 7: '7',
    8: '8', 9: '9', 10: '10', 11: 'J', 12: 'Q',
    13: 'K', 14: 'A', 15: '2', 16: 'X', 17: 'D'
}

# 显示字符到牌面值的映射
STR_TO_RANK: Dict[str, int] = {v: k for k, v in RANK_TO_STR.items()}

# 用于描述的牌面名称
RANK_NAMES: Dict[int, str] = {
    **RANK_TO_STR,
    16: 'Black Joker',
    17: 'Red Joker',
}

SUIT_SYMBOLS: Dict[Suit, str] = {
    Suit.SPADES: '♠',
    Suit.HEARTS: '♥',
    Suit.DIAMONDS: '♦',
    Suit.CLUBS: '♣',
    Suit.JOKER: '',
}

# 可以参与顺子/连对/飞机的最大牌面值 (2 和王除外)
MAX_RUN_RANK = Rank.ACE

# 计数向量长度: 3..A, 2, 小王, 大王
NUM_RANKS = 15

DECK_SIZE = 54


@dataclass(frozen=True, order=True)
class Card:
    """
    不可变的牌

    排序先按牌面值、再按 id，保证同一手牌的显示顺序稳定

    Attributes:
        value: 牌面值 (Rank)
        id: 唯一标识
        suit: 花色
        rank: 显示字符 ('3'..'A', '2', 'X', 'D')
    """
    value: int
    id: int
    suit: Suit
    rank: str

    @property
    def is_joker(self) -> bool:
        return self.suit == Suit.JOKER

    def __str__(self) -> str:
        if self.is_joker:
            return RANK_NAMES[self.value]
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"


def make_card(card_id: int, suit: Suit, value: int) -> Card:
    """按牌面值构造一张牌"""
    return Card(value=int(value), id=card_id, suit=suit, rank=RANK_TO_STR[value])


def build_deck() -> List[Card]:
    """
    构造完整牌组 (54 张，未洗牌)

    id 按牌面值、花色顺序分配，3♠=0 ... 2♣=51，小王=52，大王=53

    Returns:
        按 id 排序的牌列表
    """
    deck = []
    card_id = 0
    for value in range(Rank.THREE, Rank.TWO + 1):
        for suit in PLAIN_SUITS:
            deck.append(make_card(card_id, suit, value))
            card_id += 1
    deck.append(make_card(card_id, Suit.JOKER, Rank.BLACK_JOKER))
    deck.append(make_card(card_id + 1, Suit.JOKER, Rank.RED_JOKER))
    return deck


def rank_counts(cards: Iterable[Card]) -> np.ndarray:
    """
    将牌转换为 15 维计数向量

    列 0-11 为 3-A，列 12 为 2，列 13-14 为小王大王

    Args:
        cards: 牌

    Returns:
        (15,) int 数组
    """
    counts = np.zeros(NUM_RANKS, dtype=np.int64)
    for card in cards:
        counts[card.value - Rank.THREE] += 1
    return counts


def group_by_rank(cards: Iterable[Card]) -> Dict[int, List[Card]]:
    """按牌面值分组，组内按 id 排序"""
    groups: Dict[int, List[Card]] = {}
    for card in sorted(cards):
        groups.setdefault(card.value, []).append(card)
    return groups


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌转换为可读字符串

    Returns:
        如 "34567" 或 "JQKA2XD"
    """
    return ''.join(card.rank for card in sorted(cards))


def str_to_values(s: str) -> List[int]:
    """
    将字符串转换为牌面值列表

    Args:
        s: 牌字符串，如 "34567"、"10JQKA"，空格会被忽略

    Returns:
        牌面值列表
    """
    s = s.replace(' ', '').upper()
    values = []
    i = 0
    while i < len(s):
        if s[i:i+2] == '10':
            values.append(10)
            i += 2
        else:
            if s[i] not in STR_TO_RANK:
                raise ValueError(f"Unknown card symbol: {s[i]!r}")
            values.append(STR_TO_RANK[s[i]])
            i += 1
    return values


def str_to_cards(s: str, deck: Optional[List[Card]] = None) -> List[Card]:
    """
    从牌组中取出字符串描述的牌

    每个牌面值依次取该值下 id 最小且未被取过的牌，保证 id 不重复

    Args:
        s: 牌字符串
        deck: 可选牌组，默认完整牌组

    Returns:
        牌列表

    Raises:
        ValueError: 牌组中该牌面值的牌不足
    """
    available = group_by_rank(deck if deck is not None else build_deck())
    taken: Counter = Counter()
    cards = []
    for value in str_to_values(s):
        pool = available.get(value, [])
        if taken[value] >= len(pool):
            raise ValueError(f"Not enough cards of rank {RANK_TO_STR[value]} in deck")
        cards.append(pool[taken[value]])
        taken[value] += 1
    return cards


def is_run_rank(value: int) -> bool:
    """检查牌面值能否参与顺子/连对/飞机"""
    return value <= MAX_RUN_RANK


def is_consecutive(values: List[int]) -> bool:
    """
    检查已排序的牌面值是否连续

    Args:
        values: 已排序的牌面值列表

    Returns:
        是否连续
    """
    for i in range(len(values) - 1):
        if values[i + 1] - values[i] != 1:
            return False
    return True
