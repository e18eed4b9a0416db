"""
Script computing the validator's profitability over the current billing cycle
and optionally posting the report to Slack. Runs once per invocation.
"""

from __future__ import annotations

import sys
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from slack.web.client import WebClient

from validator_economics.config import ConfigurationError, ReportingConfig
from validator_economics.fetch.epoch import ResolutionError
from validator_economics.fetch.prices import PriceLookupError, sol_usd_price
from validator_economics.fetch.profitability import compute_profitability_report
from validator_economics.fetch.rpc import SolanaRpcClient
from validator_economics.fetch.trillium import TrilliumClient
from validator_economics.logger import set_log
from validator_economics.models.report import ProfitabilityReport
from validator_economics.report import (
    format_epoch_breakdown,
    format_report,
)
from validator_economics.slack_utils import notify, slack_client_from_token
from validator_economics.utils.print_store import Category, PrintStore
from validator_economics.utils.script_args import ScriptArgs, generic_script_init

log = set_log(__name__)


def load_config(args: ScriptArgs) -> ReportingConfig:
    """Environment configuration with command line overrides applied"""
    config = ReportingConfig.from_env(**args.config_overrides())
    if args.max_workers is not None:
        config = replace(
            config,
            reward_source_config=replace(
                config.reward_source_config, max_workers=args.max_workers
            ),
        )
    if args.send_to_slack and not (
        config.io_config.slack_channel and config.io_config.slack_token
    ):
        raise ConfigurationError(
            "--send-to-slack requires env vars SLACK_CHANNEL and SLACK_TOKEN"
        )
    return config


def run(
    config: ReportingConfig,
    price_lookup: Optional[Callable[[], float]] = None,
    now: Optional[datetime] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ProfitabilityReport:
    """Computes the report with clients built from `config`"""
    node_config = config.node_config
    source_config = config.reward_source_config
    chain = SolanaRpcClient(node_config.rpc_url, timeout=node_config.timeout)
    trillium = TrilliumClient(
        api_url=source_config.api_url,
        timeout=source_config.timeout,
        max_workers=source_config.max_workers,
    )
    return compute_profitability_report(
        vote_account=config.profitability_config.vote_account,
        config=config.profitability_config,
        price_lookup=price_lookup or sol_usd_price,
        reward_fetcher=trillium,
        chain=chain,
        seconds_per_slot=node_config.network.seconds_per_slot(),
        now=now,
        cancel_event=cancel_event,
    )


def publish(report: ProfitabilityReport, log_saver: PrintStore) -> None:
    """Prints the report and keeps its sections for notification"""
    log_saver.print(format_report(report), category=Category.GENERAL)
    log_saver.print(format_epoch_breakdown(report.records), category=Category.EPOCHS)
    if report.warnings:
        log.warning(f"Report completed with {len(report.warnings)} warnings")


def main(argv: Optional[list[str]] = None) -> None:
    """Compute, print and optionally post the profitability report"""

    args = generic_script_init(
        description="Validator profitability over the billing cycle", argv=argv
    )
    try:
        config = load_config(args)
    except ConfigurationError as err:
        log.error(f"Invalid configuration: {err}")
        sys.exit(1)

    slack_client: WebClient | None = None
    slack_channel = config.io_config.slack_channel
    if args.send_to_slack:
        assert slack_channel is not None
        slack_client = slack_client_from_token(config.io_config.slack_token)

    cancel_event = threading.Event()
    try:
        report = run(config, cancel_event=cancel_event)
    except (ResolutionError, PriceLookupError) as err:
        log.error(f"Profitability report failed: {err}")
        if slack_client is not None and slack_channel is not None:
            notify(
                slack_client,
                channel=slack_channel,
                message=f"❌ Validator profitability report failed: {err}",
                sub_messages={},
            )
        return

    log_saver = PrintStore()
    publish(report, log_saver)
    if slack_client is not None and slack_channel is not None:
        notify(
            slack_client,
            channel=slack_channel,
            message=log_saver.get_value(Category.GENERAL),
            sub_messages=log_saver.get_values(exclude=(Category.GENERAL,)),
        )


if __name__ == "__main__":
    main()
