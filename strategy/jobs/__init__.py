# PATH: strategy/jobs/__init__.py
"""
Strategy jobs package.

Available entry points:
    python -m strategy.jobs.run_evaluate    # Evaluate opportunities from a file or stdin

NOTE: This __init__.py intentionally does NOT import run_evaluate
to avoid side effects when importing the package. Import it directly when needed:

    from strategy.jobs.run_evaluate import evaluate_opportunities
"""

__all__: list[str] = []
