"""
The computed profitability of one billing cycle.
"""
from __future__ import annotations

from dataclasses import dataclass

from validator_economics.models.billing_cycle import BillingCycle
from validator_economics.models.rewards import EpochRewardRecord, RewardsSummary
from validator_economics.models.warning import ReportWarning


@dataclass(frozen=True)
class ProfitabilityReport:  # pylint: disable=too-many-instance-attributes
    """
    Accrued and projected figures of a billing cycle.
    Native amounts are in SOL, fiat amounts in USD.
    """

    cycle: BillingCycle
    summary: RewardsSummary
    sol_price: float
    vote_cost_reimbursement_percent: float
    reimbursed_vote_cost: float
    total_revenue_native: float
    net_gain_native: float
    revenue_fiat: float
    vote_cost_fiat: float
    monthly_base_expense_fiat: float
    monthly_total_expense_fiat: float
    accrued_expense_fiat: float
    projected_revenue_fiat: float
    projected_profit_fiat: float
    coverage_percent: float
    projected_coverage_percent: float
    start_epoch: int | None = None
    end_epoch: int | None = None
    records: tuple[EpochRewardRecord, ...] = ()
    warnings: tuple[ReportWarning, ...] = ()

    @property
    def accrued_profit_fiat(self) -> float:
        """Revenue minus the expenses accrued so far"""
        return self.revenue_fiat - self.accrued_expense_fiat

    @property
    def on_track(self) -> bool:
        """Projected revenue reaches the cycle's total expenses"""
        return self.projected_revenue_fiat >= self.monthly_total_expense_fiat

    @property
    def accrued_expenses_covered(self) -> bool:
        """Revenue so far covers the expenses accrued so far"""
        return self.coverage_percent >= 100
