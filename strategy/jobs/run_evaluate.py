#!/usr/bin/env python3
"""
strategy/jobs/run_evaluate.py - CLI entrypoint for opportunity evaluation.

Usage:
    python -m strategy.jobs.run_evaluate opportunity.json
    python -m strategy.jobs.run_evaluate opportunities.yaml --config config/chains.yaml
    tail -f feed.jsonl | python -m strategy.jobs.run_evaluate --lines -

Each JSON line on the stream is one "new opportunity arrived" event and
its result is printed as soon as it is evaluated. With --output-json,
stdout carries only JSON lines; banners and totals go to stderr.
Exit code is 1 if any evaluation failed.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, AsyncIterable, AsyncIterator, Callable, Iterable, Optional, TextIO

import click
import yaml

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from config.settings import Settings, load_settings
from core.exceptions import ConfigError, XarbError
from core.logging import get_logger, set_global_context, setup_logging
from core.models import ArbitrageResult, OpportunityRecord
from dex.venues import build_venues
from metadata.cache import MetadataCache
from metadata.resolver import build_resolver
from strategy.evaluator import ArbitrageEvaluator
from strategy.report import summarize_result

logger = get_logger("xarb.evaluate")


def parse_document(text: str, suffix: str = ".json") -> list[dict[str, Any]]:
    """
    Parse a JSON or YAML document holding one opportunity or a list.

    Raises:
        ConfigError: Document is not a mapping or list of mappings
    """
    if suffix.lower() in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML opportunity document: {e}")
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON opportunity document: {e}")

    docs = data if isinstance(data, list) else [data]
    for doc in docs:
        if not isinstance(doc, dict):
            raise ConfigError(
                "Opportunity document must be a mapping or a list of mappings",
                {"got": type(doc).__name__},
            )
    return docs


def _parse_line(line: str) -> dict[str, Any] | str | None:
    line = line.strip()
    if not line:
        return None
    try:
        return json.loads(line)
    except json.JSONDecodeError:
        return line


async def aiter_json_lines(stream: TextIO) -> AsyncIterator[dict[str, Any] | str]:
    """
    Yield one parsed document per non-blank line as each line arrives.

    Reads happen in a worker thread so a quiet stream (tail -f) never
    blocks the event loop. Unparseable lines are yielded as the raw string
    so the caller can report them as failed evaluations without stopping.
    """
    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            return
        doc = _parse_line(line)
        if doc is not None:
            yield doc


async def _documents(
    docs: Iterable[dict[str, Any] | str] | AsyncIterable[dict[str, Any] | str],
) -> AsyncIterator[dict[str, Any] | str]:
    if isinstance(docs, AsyncIterable):
        async for doc in docs:
            yield doc
    else:
        for doc in docs:
            yield doc


ResultCallback = Callable[[Optional[OpportunityRecord], ArbitrageResult], None]


async def evaluate_opportunities(
    settings: Settings,
    docs: Iterable[dict[str, Any] | str] | AsyncIterable[dict[str, Any] | str],
    on_result: ResultCallback | None = None,
) -> dict[str, int]:
    """
    Evaluate documents one after another with a shared cache and clients.

    on_result receives (record or None if it failed validation, result)
    as soon as each document is evaluated, before the next one is read.

    Returns:
        Run totals: evaluated, failed, profitable
    """
    resolver = build_resolver(settings, MetadataCache())
    venues = build_venues(settings, resolver)
    evaluator = ArbitrageEvaluator(settings, resolver, venues)

    totals = {"evaluated": 0, "failed": 0, "profitable": 0}
    try:
        async for doc in _documents(docs):
            record = None
            try:
                record = OpportunityRecord.from_dict(doc)
            except XarbError:
                # evaluate() reports the validation failure itself
                pass
            result = await evaluator.evaluate(record or doc)

            totals["evaluated"] += 1
            totals["failed"] += not result.success
            totals["profitable"] += result.is_profitable
            if on_result is not None:
                on_result(record, result)

        providers = resolver.evm_source.providers
        logger.info(
            "Evaluation run complete",
            extra={"context": {
                **totals,
                "cache": resolver.cache.stats(),
                "rpc": {
                    chain: providers.get(chain).get_stats_summary()
                    for chain in providers.chains
                },
            }},
        )
    finally:
        await venues.close()
        await resolver.close()

    return totals


def _read_input(source: TextIO, lines: bool, suffix: str):
    if lines:
        return aiter_json_lines(source)
    return parse_document(source.read(), suffix)


@click.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option(
    "--lines/--document",
    default=False,
    help="Treat input as JSON lines (one opportunity per line)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Chain settings YAML (default: config/chains.yaml)",
)
@click.option(
    "--log-level",
    "-l",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON log format",
)
@click.option(
    "--output-json",
    is_flag=True,
    default=False,
    help="Print each result as a JSON object instead of a summary",
)
def main(
    source: TextIO,
    lines: bool,
    config_path: str | None,
    log_level: str,
    json_logs: bool,
    output_json: bool,
) -> None:
    """
    XARB Opportunity Evaluator.

    Quotes both legs of each opportunity and reports net USDC profit.
    """
    setup_logging(level=log_level, json_output=json_logs)
    set_global_context(
        service="xarb-evaluate",
        version="0.1.0",
    )

    # Banners go to stderr with --output-json so stdout stays pure JSON lines
    click.echo("=" * 60, err=output_json)

    def emit(record: OpportunityRecord | None, result: ArbitrageResult) -> None:
        if output_json:
            click.echo(json.dumps(result.to_dict()))
            return
        for line in summarize_result(record, result):
            click.echo(line)
        click.echo("-" * 60)

    try:
        settings = load_settings(config_path)
        docs = _read_input(source, lines, Path(source.name).suffix)
        totals = asyncio.run(evaluate_opportunities(settings, docs, on_result=emit))
    except KeyboardInterrupt:
        logger.info("Evaluation interrupted")
        sys.exit(130)
    except XarbError as e:
        logger.error(
            f"Evaluation run error: {e}",
            extra={"context": e.to_dict()},
        )
        sys.exit(2)

    click.echo(
        f"Evaluated: {totals['evaluated']}  Failed: {totals['failed']}",
        err=output_json,
    )
    click.echo("=" * 60, err=output_json)

    if totals["failed"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
