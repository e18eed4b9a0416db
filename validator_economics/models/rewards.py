"""
Per-epoch reward records and their cumulative totals.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EpochRewardRecord:
    """
    Economic activity of one vote account in a single epoch.
    Amounts are in SOL as reported by the provider, rates are fractions in [0, 1].
    """

    epoch: int
    vote_reward: float
    jito_tips: float
    block_reward: float
    vote_cost: float
    commission_rate: float
    mev_commission_rate: float


@dataclass(frozen=True)
class RewardsSummary:
    """Totals accrued to the operator over an epoch range"""

    total_vote_reward: float = 0.0
    total_jito_reward: float = 0.0
    total_block_reward: float = 0.0
    total_vote_cost: float = 0.0
    epochs_covered: int = 0

    @property
    def total_revenue(self) -> float:
        """Vote, Jito and block rewards combined"""
        return self.total_vote_reward + self.total_jito_reward + self.total_block_reward

    def __add__(self, other: RewardsSummary) -> RewardsSummary:
        """Combines summaries of disjoint epoch ranges"""
        return RewardsSummary(
            total_vote_reward=self.total_vote_reward + other.total_vote_reward,
            total_jito_reward=self.total_jito_reward + other.total_jito_reward,
            total_block_reward=self.total_block_reward + other.total_block_reward,
            total_vote_cost=self.total_vote_cost + other.total_vote_cost,
            epochs_covered=self.epochs_covered + other.epochs_covered,
        )

    def __str__(self) -> str:
        return (
            f"RewardsSummary(vote={self.total_vote_reward:.4f},"
            f"jito={self.total_jito_reward:.4f},block={self.total_block_reward:.4f},"
            f"vote_cost={self.total_vote_cost:.4f},epochs={self.epochs_covered})"
        )
