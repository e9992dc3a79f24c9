"""
strategy/report.py - Human-readable evaluation output.

Display only: every value here is formatted from amounts the evaluator
already computed.
"""

from core.format_money import format_money, format_pct, format_price, format_units
from core.logging import ContextAdapter
from core.models import ArbitrageResult, OpportunityRecord, Quote


def describe_route(
    quote: Quote,
    token_symbol: str,
    usdc_mint: str,
    token_decimals: int,
    usdc_decimals: int = 6,
) -> list[str]:
    """One line per route hop: label, share of flow, formatted in/out."""
    lines = []
    for index, hop in enumerate(quote.route_plan, start=1):
        in_is_usdc = hop.input_mint == usdc_mint
        out_is_usdc = hop.output_mint == usdc_mint
        lines.append(
            f"Step {index}: {hop.label} ({hop.percent}%) "
            f"in={format_units(hop.in_amount, usdc_decimals if in_is_usdc else token_decimals, 'USDC' if in_is_usdc else token_symbol)} "
            f"out={format_units(hop.out_amount, usdc_decimals if out_is_usdc else token_decimals, 'USDC' if out_is_usdc else token_symbol)}"
        )
    return lines


def log_route(
    logger: ContextAdapter,
    side: str,
    quote: Quote,
    token_symbol: str,
    usdc_mint: str,
    token_decimals: int,
) -> None:
    """Log a multi-hop route plan, if the venue returned one."""
    if not quote.route_plan:
        return
    for line in describe_route(quote, token_symbol, usdc_mint, token_decimals):
        logger.info(
            f"{side} route {line}",
            extra={"context": {"venue": quote.venue, "side": side}},
        )


def _price_text(price) -> str:
    # None means no tokens were received; 0.000000 would read as a real price
    if price is None:
        return "n/a"
    return f"{format_price(price)} USDC"


def summarize_result(record: OpportunityRecord | None, result: ArbitrageResult) -> list[str]:
    """Lines for the console summary of one evaluation."""
    header = (
        f"{record.token_symbol}: {record.buy_chain} -> {record.sell_chain}"
        if record else "Opportunity"
    )
    if not result.success:
        return [
            f"{header}",
            f"  FAILED after {result.last_stage.value if result.last_stage else 'START'}: {result.error}",
        ]

    lines = [header]
    if result.gas_cost is not None and result.gas_details is not None:
        lines.extend([
            f"  Gas Units: {result.gas_details.gas_units}",
            f"  Gas Price: {result.gas_details.gas_price_wei} wei",
            f"  ETH/USD Rate: {result.gas_details.native_to_usd_rate}",
            f"  Total Gas Cost: {format_money(result.gas_cost)} USDC",
        ])
    lines.extend([
        f"  Profit: {format_money(result.profit)} USDC",
        f"  Buy Price: {_price_text(result.buy_price)}",
        f"  Sell Price: {_price_text(result.sell_price)}",
    ])
    if result.price_impact_pct is not None:
        lines.append(f"  Price Impact: {format_pct(result.price_impact_pct)}%")
    lines.append(f"  Processing Time: {result.processing_time_ms}ms")
    lines.append(
        "  Token Decimals: "
        + ", ".join(f"{chain}={decimals}" for chain, decimals in result.token_decimals.items())
    )
    for warning in result.warnings:
        lines.append(f"  Warning: {warning}")
    return lines
