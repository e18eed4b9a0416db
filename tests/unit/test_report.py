import unittest
from dataclasses import replace
from datetime import datetime, timedelta

from validator_economics.fetch.profitability import project
from validator_economics.models.billing_cycle import BillingCycle
from validator_economics.models.rewards import EpochRewardRecord, RewardsSummary
from validator_economics.models.warning import ReportWarning, WarningKind
from validator_economics.report import (
    format_epoch_breakdown,
    format_report,
    format_warnings,
)

START = datetime(2025, 3, 1)
END = datetime(2025, 4, 1)


def sample_report(now: datetime = datetime(2025, 3, 16, 12), warnings=()):
    report = project(
        cycle=BillingCycle(START, END, now),
        summary=RewardsSummary(
            total_vote_reward=2.5,
            total_jito_reward=1.25,
            total_block_reward=0.75,
            total_vote_cost=1.0,
            epochs_covered=7,
        ),
        sol_price=140.0,
        monthly_base_expense=1400,
        vote_cost_reimbursement_percent=50,
        warnings=warnings,
    )
    return report


class TestFormatReport(unittest.TestCase):
    def test_sections(self):
        text = format_report(sample_report())
        lines = text.splitlines()
        self.assertEqual(lines[0], "🧾 Validator Profit Report")
        self.assertIn("SOL Price: $140.0", lines)
        self.assertIn("Period: 2025-03-01 → 2025-03-16", lines)
        self.assertIn("---Revenues---", lines)
        self.assertIn("Revenue: 4.50 SOL ($560.00)", lines)
        self.assertIn("• Vote rewards: 2.50 SOL", lines)
        self.assertIn("• Jito tips: 1.25 SOL", lines)
        self.assertIn("• Vote costs: 0.50 SOL (50% reimbursed)", lines)
        self.assertIn("• SOL Gained: 4.00 SOL ($560.00)", lines)
        self.assertIn("• Elapsed: 50.00%", lines)
        self.assertNotIn("Warnings", text)

    def test_coverage_status(self):
        text = format_report(sample_report())
        # 560 of 700 + 70 accrued, projected 1120 of 1470
        self.assertIn("• Coverage: 72.73%", text)
        self.assertIn("🟡 You've covered 72.73% of accrued expenses.", text)
        self.assertIn("⚠️ Behind pace (projected: 76.2%)", text)

    def test_epoch_range_in_period(self):
        report = sample_report()
        report = replace(report, start_epoch=692, end_epoch=699)
        self.assertIn(
            "Period: 2025-03-01 → 2025-03-16 (epochs 692-698, 7 with rewards)",
            format_report(report),
        )

    def test_elapsed_outside_cycle(self):
        text = format_report(sample_report(now=END + timedelta(days=31)))
        self.assertIn("• Elapsed: 100.00% (cycle ended, raw 200.00%)", text)
        text = format_report(sample_report(now=START - timedelta(days=31)))
        self.assertIn("• Elapsed: 0.00% (cycle not started, raw -100.00%)", text)

    def test_warnings_section(self):
        warnings = [
            ReportWarning(WarningKind.BULK_SOURCE_FAILURE, "history unavailable"),
            ReportWarning(WarningKind.SOURCE_FETCH_ERROR, "read timed out", 693),
        ]
        report = sample_report(warnings=warnings)
        text = format_report(report)
        self.assertIn("---Warnings (2)---", text)
        self.assertIn("Figures above may be incomplete:", text)
        self.assertEqual(
            format_warnings(report),
            "• [bulk source failure] history unavailable\n"
            "• [source fetch error] epoch 693: read timed out",
        )
        self.assertTrue(text.endswith(format_warnings(report)))


class TestEpochBreakdown(unittest.TestCase):
    def test_breakdown(self):
        records = [
            EpochRewardRecord(693, 10.0, 5.0, 0.25, 0.5, 0.1, 0.08),
            EpochRewardRecord(692, 20.0, 0.0, 0.0, 0.5, 0.1, 0.08),
        ]
        lines = format_epoch_breakdown(records).splitlines()
        self.assertEqual(
            lines[0].split(),
            ["epoch", "vote_reward", "jito_reward", "block_reward", "vote_cost"],
        )
        self.assertEqual(lines[1].split(), ["692", "2.0000", "0.0000", "0.0000", "0.5000"])
        self.assertEqual(lines[2].split(), ["693", "1.0000", "0.4000", "0.2500", "0.5000"])

    def test_no_records(self):
        self.assertEqual(format_epoch_breakdown([]), "No reward records.")


if __name__ == "__main__":
    unittest.main()
