"""
strategy/evaluator.py - Cross-chain arbitrage evaluation pipeline.

START -> METADATA_RESOLVED -> BUY_QUOTED -> AMOUNT_NORMALIZED
      -> SELL_QUOTED -> EVALUATED, or FAILED from any stage.

The buy leg swaps a fixed USDC notional into the token; the received
amount is re-expressed in the sell chain's token precision and swapped
back to USDC on the sell chain. Net profit subtracts gas for the leg the
opportunity marks as running on the gas-metered chain.

evaluate() never raises: every failure becomes success=False.
"""

import asyncio
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping

from config.settings import Settings
from core.constants import (
    SOLANA_DEFAULT_DECIMALS,
    USDC_DECIMALS,
    ChainFamily,
    ErrorCode,
    EthereumRole,
    EvaluationStage,
    RoundingMode,
)
from core.decimals import convert_decimals, to_base_units, to_human
from core.exceptions import XarbError
from core.format_money import format_money, format_units
from core.gas import gas_cost_for_quote
from core.logging import get_logger, log_error
from core.models import (
    ArbitrageResult,
    GasDetails,
    OpportunityRecord,
    Quote,
    TokenMetadata,
)
from core.time import elapsed_ms, now_ms
from dex.venues import VenueRouter
from metadata.resolver import TokenMetadataResolver
from strategy.report import log_route

logger = get_logger("xarb.evaluator")


@dataclass
class LegMetadata:
    """Token and USDC precision for one leg's chain."""
    chain: str
    family: ChainFamily
    token_address: str
    usdc_address: str
    token_decimals: int
    usdc_decimals: int
    token: TokenMetadata | None = None
    usdc: TokenMetadata | None = None


@dataclass
class EvaluationTrace:
    """Mutable progress of one evaluation, used to report failures."""
    started_ms: int
    stage: EvaluationStage = EvaluationStage.START
    record: OpportunityRecord | None = None
    token_decimals: dict[str, int] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


class ArbitrageEvaluator:
    """
    Evaluates one opportunity end to end.

    Usage:
        cache = MetadataCache()
        resolver = build_resolver(settings, cache)
        evaluator = ArbitrageEvaluator(settings, resolver, build_venues(settings, resolver))
        result = await evaluator.evaluate(opportunity_doc)
    """

    def __init__(
        self,
        settings: Settings,
        resolver: TokenMetadataResolver,
        venues: VenueRouter,
        rounding: RoundingMode = RoundingMode.TRUNCATE,
    ):
        self.settings = settings
        self.resolver = resolver
        self.venues = venues
        self.rounding = rounding

    async def evaluate(
        self,
        opportunity: OpportunityRecord | Mapping[str, Any],
    ) -> ArbitrageResult:
        """
        Evaluate an opportunity.

        Args:
            opportunity: Record, or a raw datastore document

        Returns:
            ArbitrageResult; success=False carries error and error_code
        """
        trace = EvaluationTrace(started_ms=now_ms())
        try:
            return await self._evaluate(opportunity, trace)
        except XarbError as e:
            log_error(
                logger,
                e.code.value,
                f"Error processing arbitrage opportunity: {e.message}",
                stage=trace.stage.value,
                details=e.details,
            )
            return self._failure(trace, e.message or str(e), e.code)
        except Exception as e:
            logger.error(
                f"Unexpected error processing arbitrage opportunity: {e}",
                extra={"context": {"stage": trace.stage.value, "error_type": type(e).__name__}},
                exc_info=True,
            )
            return self._failure(trace, str(e) or type(e).__name__, ErrorCode.UNKNOWN)

    async def _evaluate(
        self,
        opportunity: OpportunityRecord | Mapping[str, Any],
        trace: EvaluationTrace,
    ) -> ArbitrageResult:
        record = (
            opportunity
            if isinstance(opportunity, OpportunityRecord)
            else OpportunityRecord.from_dict(opportunity)
        )
        trace.record = record

        # Fail fast on chains with no venue before any network call
        self.venues.for_chain(record.buy_chain)
        self.venues.for_chain(record.sell_chain)

        logger.info(
            f"Processing arbitrage opportunity for {record.token_symbol}",
            extra={"context": record.to_dict()},
        )

        # METADATA_RESOLVED
        buy_leg, sell_leg = await asyncio.gather(
            self._resolve_leg(record.buy_chain, record.buy_address),
            self._resolve_leg(record.sell_chain, record.sell_address),
        )
        for leg in (buy_leg, sell_leg):
            for meta in (leg.token, leg.usdc):
                if meta is not None and meta.is_defaulted:
                    trace.warnings.append(
                        f"Defaulted metadata for {meta.address} on {leg.chain}: "
                        f"{meta.decimals} decimals"
                    )
        trace.token_decimals = {
            buy_leg.chain: buy_leg.token_decimals,
            sell_leg.chain: sell_leg.token_decimals,
        }
        trace.stage = EvaluationStage.METADATA_RESOLVED

        # BUY_QUOTED
        start_amount = to_base_units(self.settings.start_notional_usdc, buy_leg.usdc_decimals)
        logger.info(
            "Processing buy side",
            extra={"context": {
                "chain": buy_leg.chain,
                "input": format_units(start_amount, buy_leg.usdc_decimals, "USDC"),
            }},
        )
        buy_quote = await self.venues.get_swap_quote(
            buy_leg.chain, buy_leg.usdc_address, record.buy_address, start_amount,
        )
        token_received = buy_quote.output_amount

        buy_token_decimals = buy_leg.token_decimals
        if buy_leg.family == ChainFamily.SOLANA and buy_quote.output_decimals != buy_token_decimals:
            # Venue-reported precision wins over the Solana convention
            buy_token_decimals = buy_quote.output_decimals
            trace.token_decimals[buy_leg.chain] = buy_token_decimals
        trace.stage = EvaluationStage.BUY_QUOTED

        log_route(logger, "Buy", buy_quote, record.token_symbol, buy_leg.usdc_address, buy_token_decimals)

        # AMOUNT_NORMALIZED
        if record.is_cross_chain:
            sell_token_decimals = sell_leg.token_decimals
            adjusted_amount = convert_decimals(
                token_received, buy_token_decimals, sell_token_decimals, self.rounding,
            )
        else:
            sell_token_decimals = buy_token_decimals
            adjusted_amount = token_received
        trace.stage = EvaluationStage.AMOUNT_NORMALIZED

        # SELL_QUOTED
        logger.info(
            "Processing sell side",
            extra={"context": {
                "chain": sell_leg.chain,
                "input": format_units(adjusted_amount, sell_token_decimals, record.token_symbol),
            }},
        )
        sell_quote = await self.venues.get_swap_quote(
            sell_leg.chain, record.sell_address, sell_leg.usdc_address, adjusted_amount,
        )
        if sell_quote.input_decimals != sell_token_decimals:
            trace.warnings.append(
                f"Sell venue reports {sell_quote.input_decimals} decimals for "
                f"{record.sell_address}; amount was normalized to {sell_token_decimals}"
            )
        trace.stage = EvaluationStage.SELL_QUOTED

        log_route(logger, "Sell", sell_quote, record.token_symbol, sell_leg.usdc_address, sell_token_decimals)

        # EVALUATED
        initial_usdc = to_human(start_amount, buy_leg.usdc_decimals)
        final_usdc = to_human(sell_quote.output_amount, sell_leg.usdc_decimals)
        token_amount = to_human(token_received, buy_token_decimals)

        gas_cost, gas_details = self._gas_cost(record, buy_quote, sell_quote)
        profit = final_usdc - initial_usdc - gas_cost

        buy_price = sell_price = None
        if token_amount > 0:
            buy_price = initial_usdc / token_amount
            sell_price = final_usdc / token_amount
        else:
            trace.warnings.append("Buy leg returned zero tokens; prices omitted")

        trace.stage = EvaluationStage.EVALUATED
        result = ArbitrageResult(
            success=True,
            stage=trace.stage,
            processing_time_ms=elapsed_ms(trace.started_ms),
            profit=profit,
            gas_cost=gas_cost if gas_cost > 0 else None,
            gas_details=gas_details if gas_cost > 0 else None,
            buy_price=buy_price,
            sell_price=sell_price,
            price_impact_pct=self._price_impact(buy_quote, sell_quote),
            token_decimals=dict(trace.token_decimals),
            start_amount=start_amount,
            token_amount_received=token_received,
            adjusted_token_amount=adjusted_amount,
            final_amount=sell_quote.output_amount,
            warnings=list(trace.warnings),
        )

        logger.info(
            f"Arbitrage results for {record.token_symbol}: profit {format_money(profit)} USDC",
            extra={"context": {
                "buy_chain": record.buy_chain,
                "sell_chain": record.sell_chain,
                "initial": format_units(start_amount, buy_leg.usdc_decimals, "USDC"),
                "received": format_units(token_received, buy_token_decimals, record.token_symbol),
                "final": format_units(sell_quote.output_amount, sell_leg.usdc_decimals, "USDC"),
                "gas_cost": format_money(gas_cost),
                "processing_time_ms": result.processing_time_ms,
                "token_decimals": result.token_decimals,
                "usdc_decimals": {
                    buy_leg.chain: buy_leg.usdc_decimals,
                    sell_leg.chain: sell_leg.usdc_decimals,
                },
            }},
        )
        return result

    async def _resolve_leg(self, chain: str, token_address: str) -> LegMetadata:
        """
        Token/USDC precision for a leg.

        EVM chains resolve both concurrently. Solana uses fixed
        conventions (USDC 6, token 8) that a buy quote may later override.
        """
        chain_settings = self.settings.get_chain(chain)
        usdc_address = chain_settings.usdc_address

        if chain_settings.family == ChainFamily.SOLANA:
            return LegMetadata(
                chain=chain,
                family=ChainFamily.SOLANA,
                token_address=token_address,
                usdc_address=usdc_address,
                token_decimals=SOLANA_DEFAULT_DECIMALS,
                usdc_decimals=USDC_DECIMALS,
            )

        token, usdc = await asyncio.gather(
            self.resolver.resolve(chain, token_address),
            self.resolver.resolve(chain, usdc_address),
        )
        return LegMetadata(
            chain=chain,
            family=chain_settings.family,
            token_address=token_address,
            usdc_address=usdc_address,
            token_decimals=token.decimals,
            usdc_decimals=usdc.decimals,
            token=token,
            usdc=usdc,
        )

    def _gas_cost(
        self,
        record: OpportunityRecord,
        buy_quote: Quote,
        sell_quote: Quote,
    ) -> tuple[Decimal, GasDetails | None]:
        """Gas in USDC for the leg the role marks, if it runs on the gas-metered chain."""
        metered = self.settings.gas_metered_chain
        if record.ethereum_role == EthereumRole.BUY and record.buy_chain == metered:
            return gas_cost_for_quote(buy_quote)
        if record.ethereum_role == EthereumRole.SELL and record.sell_chain == metered:
            return gas_cost_for_quote(sell_quote)
        return Decimal("0"), None

    @staticmethod
    def _price_impact(buy_quote: Quote, sell_quote: Quote) -> Decimal | None:
        if buy_quote.price_impact_pct is not None:
            return buy_quote.price_impact_pct
        return sell_quote.price_impact_pct

    @staticmethod
    def _failure(trace: EvaluationTrace, message: str, code: ErrorCode) -> ArbitrageResult:
        return ArbitrageResult(
            success=False,
            stage=EvaluationStage.FAILED,
            processing_time_ms=elapsed_ms(trace.started_ms),
            token_decimals=dict(trace.token_decimals),
            error=message,
            error_code=code,
            last_stage=trace.stage,
            warnings=list(trace.warnings),
        )
