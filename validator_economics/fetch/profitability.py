"""Logic for projecting validator profitability over a billing cycle"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional, Protocol

import requests

from validator_economics.config import ProfitabilityConfig
from validator_economics.fetch.epoch import ResolutionError, resolve_epoch
from validator_economics.fetch.rewards import aggregate
from validator_economics.fetch.rpc import RpcError
from validator_economics.fetch.trillium import RewardFetchResult
from validator_economics.logger import set_log
from validator_economics.models.billing_cycle import BillingCycle
from validator_economics.models.epoch_schedule import EpochSchedule
from validator_economics.models.report import ProfitabilityReport
from validator_economics.models.rewards import EpochRewardRecord, RewardsSummary
from validator_economics.models.warning import ReportWarning, WarningKind

log = set_log(__name__)


class DivisionGuardError(ZeroDivisionError):
    """A ratio of the projection has a zero denominator"""


class ChainClient(Protocol):
    """Chain timing needed to translate the billing cycle into epochs"""

    def get_current_epoch(self) -> int: ...

    def get_epoch_schedule(self) -> EpochSchedule: ...

    def get_recent_slot_and_timestamp(self) -> tuple[int, float]: ...


class RewardFetcher(Protocol):
    """Source of per-epoch reward records"""

    def fetch_rewards(
        self,
        vote_account: str,
        start_epoch: int,
        end_epoch: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> RewardFetchResult: ...


def guarded_ratio(numerator: float, denominator: float, label: str) -> float:
    """numerator / denominator, raising DivisionGuardError for a zero denominator"""
    if denominator == 0:
        raise DivisionGuardError(f"{label}: zero denominator")
    return numerator / denominator


def project(  # pylint: disable=too-many-arguments, too-many-positional-arguments, too-many-locals
    cycle: BillingCycle,
    summary: RewardsSummary,
    sol_price: float,
    monthly_base_expense: float,
    vote_cost_reimbursement_percent: float,
    records: Iterable[EpochRewardRecord] = (),
    warnings: Iterable[ReportWarning] = (),
) -> ProfitabilityReport:
    """
    Accrued and projected figures of `cycle` given the rewards earned so far.

    Revenue is extrapolated linearly from the elapsed part of the cycle.
    Nothing is clamped: runs after the cycle end or before its start (clock
    skew) produce elapsed fractions outside [0, 1] and are reported as such.
    Ratios with a zero denominator are reported as 0 with a warning.
    """
    collected = list(warnings)

    def ratio(numerator: float, denominator: float, label: str) -> float:
        try:
            return guarded_ratio(numerator, denominator, label)
        except DivisionGuardError as err:
            log.warning(f"{err}, reporting 0")
            collected.append(
                ReportWarning(WarningKind.DIVISION_GUARD, f"{err}, reported as 0")
            )
            return 0.0

    reimbursed_vote_cost = summary.total_vote_cost * (
        1 - vote_cost_reimbursement_percent / 100
    )
    total_revenue_native = summary.total_revenue
    net_gain_native = total_revenue_native - reimbursed_vote_cost
    revenue_fiat = net_gain_native * sol_price
    vote_cost_fiat = reimbursed_vote_cost * sol_price

    accrued_base_expense = monthly_base_expense * cycle.elapsed_fraction
    accrued_total_expense = accrued_base_expense + vote_cost_fiat

    elapsed_seconds = cycle.elapsed.total_seconds()
    cycle_seconds = cycle.length.total_seconds()
    projected_revenue_fiat = (
        ratio(revenue_fiat, elapsed_seconds, "projected revenue (no time elapsed)")
        * cycle_seconds
    )

    monthly_total_expense = monthly_base_expense + vote_cost_fiat
    projected_profit_fiat = projected_revenue_fiat - monthly_total_expense

    coverage_percent = (
        ratio(revenue_fiat, accrued_total_expense, "coverage (no accrued expenses)")
        * 100
    )
    projected_coverage_percent = (
        ratio(
            projected_revenue_fiat,
            monthly_total_expense,
            "projected coverage (no expenses)",
        )
        * 100
    )

    return ProfitabilityReport(
        cycle=cycle,
        summary=summary,
        sol_price=sol_price,
        vote_cost_reimbursement_percent=vote_cost_reimbursement_percent,
        reimbursed_vote_cost=reimbursed_vote_cost,
        total_revenue_native=total_revenue_native,
        net_gain_native=net_gain_native,
        revenue_fiat=revenue_fiat,
        vote_cost_fiat=vote_cost_fiat,
        monthly_base_expense_fiat=monthly_base_expense,
        monthly_total_expense_fiat=monthly_total_expense,
        accrued_expense_fiat=accrued_total_expense,
        projected_revenue_fiat=projected_revenue_fiat,
        projected_profit_fiat=projected_profit_fiat,
        coverage_percent=coverage_percent,
        projected_coverage_percent=projected_coverage_percent,
        records=tuple(records),
        warnings=tuple(collected),
    )


def resolve_epoch_range(
    chain: ChainClient, cycle: BillingCycle, seconds_per_slot: float
) -> tuple[int, int]:
    """
    Epoch range [start, end) to account for `cycle`: from the epoch the cycle
    started in up to, excluding, the last completed epoch, whose rewards may
    not be fully reported yet.
    """
    try:
        current_epoch = chain.get_current_epoch()
        schedule = chain.get_epoch_schedule()
        reference_slot, reference_timestamp = chain.get_recent_slot_and_timestamp()
    except (
        RpcError,
        requests.RequestException,
        KeyError,
        TypeError,
        ValueError,
    ) as err:
        raise ResolutionError(f"could not read chain timing: {err}") from err
    start_epoch = resolve_epoch(
        cycle.start,
        reference_slot,
        reference_timestamp,
        seconds_per_slot,
        schedule.get_epoch,
    )
    return start_epoch, current_epoch - 1


def compute_profitability_report(  # pylint: disable=too-many-arguments
    vote_account: str,
    config: ProfitabilityConfig,
    price_lookup: Callable[[], float],
    reward_fetcher: RewardFetcher,
    chain: ChainClient,
    seconds_per_slot: float = 0.4,
    now: Optional[datetime] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ProfitabilityReport:
    """
    Entry point of the profitability computation for one billing cycle.
    Per-epoch source problems end up as warnings on the report; failing to
    resolve the epoch range (ResolutionError) or to price SOL aborts the run.
    """
    cycle = BillingCycle.for_billing_day(config.billing_day, now or datetime.now())
    start_epoch, end_epoch = resolve_epoch_range(chain, cycle, seconds_per_slot)
    log.info(
        f"Fetching validator rewards for billing cycle {cycle} "
        f"from epoch {start_epoch} to {end_epoch}"
    )

    fetched = reward_fetcher.fetch_rewards(
        vote_account, start_epoch, end_epoch, cancel_event
    )
    summary = aggregate(fetched.records)
    log.info(f"Aggregated {summary}")
    if summary.epochs_covered < max(0, end_epoch - start_epoch):
        log.info(
            f"{max(0, end_epoch - start_epoch) - summary.epochs_covered} epochs "
            f"in range have no reward record"
        )

    report = project(
        cycle=cycle,
        summary=summary,
        sol_price=price_lookup(),
        monthly_base_expense=config.monthly_expenses,
        vote_cost_reimbursement_percent=config.vote_cost_reimbursement,
        records=fetched.records,
        warnings=fetched.warnings,
    )
    return replace(report, start_epoch=start_epoch, end_epoch=end_epoch)
