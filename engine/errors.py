"""
拒绝原因与前置条件错误

规则层面的违规以 RejectReason 返回，不抛异常；
发牌数据本身有误 (重复 id、手牌数量不对) 属于调用方的前置条件错误，抛 DealError
"""
from enum import Enum


class RejectReason(Enum):
    """请求被拒绝的原因"""
    INVALID_COMBINATION = "invalid_combination"      # 牌型非法
    NOT_YOUR_TURN = "not_your_turn"                  # 不是当前玩家
    CARDS_NOT_OWNED = "cards_not_owned"              # 牌不在手中
    CANNOT_BEAT_LAST_PLAY = "cannot_beat_last_play"  # 打不过上家
    MUST_MATCH_LENGTH = "must_match_length"          # 张数须与上家一致
    ALREADY_BID = "already_bid"                      # 已经叫过
    BID_TOO_LOW = "bid_too_low"                      # 叫分不高于当前分
    ILLEGAL_PASS = "illegal_pass"                    # 主动出牌时不能过
    INVALID_BID = "invalid_bid"                      # 叫分超出 0..max_bid
    WRONG_PHASE = "wrong_phase"                      # 当前阶段不接受该请求


class DealError(ValueError):
    """发牌数据不满足前置条件"""
