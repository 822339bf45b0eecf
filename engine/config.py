"""
规则配置

定义人数、叫分上限、底牌数量等规则参数
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class RulesConfig:
    """
    规则配置

    Attributes:
        num_players: 玩家数
        max_bid: 最高叫分 (叫到该分数立即成为地主)
        bonus_card_count: 底牌张数
        hand_size: 每人初始手牌数 (发牌方使用)
    """
    num_players: int = 3
    max_bid: int = 3
    bonus_card_count: int = 3
    hand_size: int = 17

    def __post_init__(self):
        if self.num_players < 2:
            raise ValueError(f"num_players must be at least 2, got {self.num_players}")
        if self.max_bid < 1:
            raise ValueError(f"max_bid must be positive, got {self.max_bid}")

    @classmethod
    def from_dict(cls, d: dict) -> 'RulesConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)
