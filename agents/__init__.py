"""
Agents Layer - 对战框架

Modules:
    agent: 智能体
    arena: 发牌与对战驱动
"""
from .agent import Agent, StrategicAgent
from .arena import MatchResult, Arena, deal_cards

__all__ = [
    "Agent",
    "StrategicAgent",
    "MatchResult",
    "Arena",
    "deal_cards",
]
