# PATH: strategy/__init__.py
"""Strategy package for XARB."""

from strategy.evaluator import ArbitrageEvaluator, EvaluationTrace, LegMetadata
from strategy.report import describe_route, summarize_result

__all__ = [
    "ArbitrageEvaluator",
    "EvaluationTrace",
    "LegMetadata",
    "describe_route",
    "summarize_result",
]
