"""Common method for initializing setup for scripts"""

import argparse
from dataclasses import dataclass
from typing import Optional


@dataclass
class ScriptArgs:
    """A collection of common script arguments relevant to this project"""

    vote_account: Optional[str]
    identity: Optional[str]
    monthly_expenses: Optional[float]
    billing_day: Optional[int]
    vote_cost_reimbursement: Optional[float]
    max_workers: Optional[int]
    send_to_slack: bool

    def config_overrides(self) -> dict[str, str | int | float | None]:
        """Flags that override environment configuration, unset flags are None"""
        return {
            "vote_account": self.vote_account,
            "identity": self.identity,
            "monthly_expenses": self.monthly_expenses,
            "billing_day": self.billing_day,
            "vote_cost_reimbursement": self.vote_cost_reimbursement,
        }


def generic_script_init(
    description: str, argv: Optional[list[str]] = None
) -> ScriptArgs:
    """
    parses command line arguments and returns this info.
    Every flag is optional and falls back to the environment (see config.py).
    """
    parser = argparse.ArgumentParser(description)
    parser.add_argument(
        "--vote-account",
        type=str,
        help="Vote account to report on. Defaults to env var `VOTE_ACCOUNT`",
    )
    parser.add_argument(
        "--identity",
        type=str,
        help="Validator identity paying vote costs. Defaults to env var `IDENTITY`",
    )
    parser.add_argument(
        "--monthly-expenses",
        type=float,
        help="Fixed expenses per billing cycle in USD. Defaults to env var `MONTHLY_EXPENSES`",
    )
    parser.add_argument(
        "--billing-day",
        type=int,
        help="Day of month a billing cycle starts on. Defaults to env var "
        "`MONTHLY_BILLING_DAY` or 1",
    )
    parser.add_argument(
        "--vote-cost-reimbursement",
        type=float,
        help="Percentage of vote costs reimbursed. Defaults to env var "
        "`VOTE_COST_REIMBURSEMENT` or 0",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        help="Concurrent per-epoch requests. Defaults to env var `TRILLIUM_MAX_WORKERS` or 4",
    )
    parser.add_argument(
        "--send-to-slack",
        action="store_true",
        help="Flag indicating whether or not the script should send the results to a slack channel",
    )
    args = parser.parse_args(argv)
    return ScriptArgs(
        vote_account=args.vote_account,
        identity=args.identity,
        monthly_expenses=args.monthly_expenses,
        billing_day=args.billing_day,
        vote_cost_reimbursement=args.vote_cost_reimbursement,
        max_workers=args.max_workers,
        send_to_slack=args.send_to_slack,
    )
