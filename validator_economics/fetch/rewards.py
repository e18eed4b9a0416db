"""Functionality for aggregating per-epoch rewards."""

from dataclasses import asdict
from typing import Iterable

import pandas as pd
from pandas import DataFrame

from validator_economics.models.rewards import EpochRewardRecord, RewardsSummary

RECORD_COLUMNS = [
    "epoch",
    "vote_reward",
    "jito_tips",
    "block_reward",
    "vote_cost",
    "commission_rate",
    "mev_commission_rate",
]

CONTRIBUTION_COLUMNS = [
    "epoch",
    "vote_reward",
    "jito_reward",
    "block_reward",
    "vote_cost",
]


def records_frame(records: Iterable[EpochRewardRecord]) -> DataFrame:
    """Records as a data frame with columns RECORD_COLUMNS, sorted by epoch"""
    frame = DataFrame([asdict(record) for record in records], columns=RECORD_COLUMNS)
    numeric = RECORD_COLUMNS[1:]
    frame[numeric] = frame[numeric].astype(float)
    frame["epoch"] = frame["epoch"].astype(int)
    return frame.sort_values("epoch", ignore_index=True)


def epoch_contributions(records: Iterable[EpochRewardRecord]) -> DataFrame:
    """Compute what each epoch contributes to the operator's totals.

    Parameters
    ----------
    records : Iterable[EpochRewardRecord]
        Sanitized records, at most one per epoch.

    Returns
    -------
    contributions : DataFrame
        The columns are CONTRIBUTION_COLUMNS:
        epoch : int
        vote_reward : float
            Inflation reward times the vote account commission.
        jito_reward : float
            MEV tips times the MEV commission.
        block_reward : float
            Block rewards, accruing fully to the operator.
        vote_cost : float
            Vote transaction fees paid by the identity.

    Notes
    -----
    Commission is applied here and only here.
    """
    frame = records_frame(records)
    contributions = pd.DataFrame(
        {
            "epoch": frame["epoch"],
            "vote_reward": frame["vote_reward"] * frame["commission_rate"],
            "jito_reward": frame["jito_tips"] * frame["mev_commission_rate"],
            "block_reward": frame["block_reward"],
            "vote_cost": frame["vote_cost"],
        },
        columns=CONTRIBUTION_COLUMNS,
    )
    assert list(contributions.columns) == CONTRIBUTION_COLUMNS
    return contributions


def aggregate(records: Iterable[EpochRewardRecord]) -> RewardsSummary:
    """Cumulative operator totals over `records`"""
    contributions = epoch_contributions(records)
    return RewardsSummary(
        total_vote_reward=float(contributions["vote_reward"].sum()),
        total_jito_reward=float(contributions["jito_reward"].sum()),
        total_block_reward=float(contributions["block_reward"].sum()),
        total_vote_cost=float(contributions["vote_cost"].sum()),
        epochs_covered=len(contributions),
    )
