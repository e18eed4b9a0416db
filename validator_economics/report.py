"""
Text rendering of profitability reports, as posted to the console and Slack.
"""
from typing import Iterable

from validator_economics.fetch.rewards import epoch_contributions
from validator_economics.models.billing_cycle import DATE_FORMAT
from validator_economics.models.report import ProfitabilityReport
from validator_economics.models.rewards import EpochRewardRecord


def _tracking_status(report: ProfitabilityReport) -> str:
    projected = f"projected: {report.projected_coverage_percent:.1f}%"
    if report.on_track:
        outcome = (
            "make profit"
            if report.projected_revenue_fiat > report.monthly_total_expense_fiat
            else "break even"
        )
        return f"✅ On track to {outcome} ({projected})"
    return f"⚠️ Behind pace ({projected})"


def _coverage_status(report: ProfitabilityReport) -> str:
    if report.accrued_expenses_covered:
        return "✅ You've covered your accrued expenses!"
    return f"🟡 You've covered {report.coverage_percent:.2f}% of accrued expenses."


def _elapsed(report: ProfitabilityReport) -> str:
    raw = report.cycle.elapsed_fraction * 100
    shown = report.cycle.display_elapsed_fraction * 100
    if raw == shown:
        return f"{shown:.2f}%"
    note = "cycle ended" if raw > shown else "cycle not started"
    return f"{shown:.2f}% ({note}, raw {raw:.2f}%)"


def format_warnings(report: ProfitabilityReport) -> str:
    """One line per warning, empty string if there are none"""
    return "\n".join(f"• {warning}" for warning in report.warnings)


def format_report(report: ProfitabilityReport) -> str:
    """Human readable summary of `report`"""
    summary = report.summary
    vote_cost_line = f"• Vote costs: {report.reimbursed_vote_cost:.2f} SOL"
    if report.vote_cost_reimbursement_percent > 0:
        vote_cost_line += f" ({report.vote_cost_reimbursement_percent:g}% reimbursed)"

    period = (
        f"Period: {report.cycle.start.strftime(DATE_FORMAT)} → "
        f"{report.cycle.now.strftime(DATE_FORMAT)}"
    )
    if report.start_epoch is not None and report.end_epoch is not None:
        period += (
            f" (epochs {report.start_epoch}-{report.end_epoch - 1}, "
            f"{summary.epochs_covered} with rewards)"
        )

    lines = [
        "🧾 Validator Profit Report",
        f"SOL Price: ${report.sol_price}",
        period,
        "",
        "---Revenues---",
        f"Revenue: {report.total_revenue_native:.2f} SOL (${report.revenue_fiat:.2f})",
        f"• Vote rewards: {summary.total_vote_reward:.2f} SOL",
        f"• Block rewards: {summary.total_block_reward:.2f} SOL",
        f"• Jito tips: {summary.total_jito_reward:.2f} SOL",
        "",
        "---Expenses---",
        vote_cost_line,
        f"• Monthly Base Expenses: ${report.monthly_base_expense_fiat:.2f}",
        f"• Monthly Total Expenses: ${report.monthly_total_expense_fiat:.2f} "
        f"(including ${report.vote_cost_fiat:.2f} vote costs)",
        f"• Accrued Total Expenses: ${report.accrued_expense_fiat:.2f} "
        f"(including ${report.vote_cost_fiat:.2f} vote costs)",
        "",
        "Summary:",
        f"• SOL Gained: {report.net_gain_native:.2f} SOL (${report.revenue_fiat:.2f})",
        f"• Current accrued profit: ${report.accrued_profit_fiat:.2f}",
        f"• Elapsed: {_elapsed(report)}",
        f"• Coverage: {report.coverage_percent:.2f}%",
        f"• Projected Monthly Profit: ${report.projected_profit_fiat:.2f}",
        _tracking_status(report),
        _coverage_status(report),
    ]
    if report.warnings:
        lines += [
            "",
            f"---Warnings ({len(report.warnings)})---",
            "Figures above may be incomplete:",
            format_warnings(report),
        ]
    return "\n".join(lines)


def format_epoch_breakdown(records: Iterable[EpochRewardRecord]) -> str:
    """Operator share per epoch as a fixed width table"""
    contributions = epoch_contributions(records)
    if contributions.empty:
        return "No reward records."
    return contributions.to_string(index=False, float_format=lambda x: f"{x:.4f}")

