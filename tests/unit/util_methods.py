from __future__ import annotations

import requests

from tests.constants import DUMMY_VOTE_ACCOUNT, OTHER_VOTE_ACCOUNT


def trillium_row(
    epoch: int,
    vote_account: str = DUMMY_VOTE_ACCOUNT,
    total_inflation_reward=1.0,
    commission=10,
    mev_earned=2.0,
    mev_commission=800,
    rewards=0.5,
    vote_cost=0.1,
) -> dict:
    """A validator_rewards row as served by the Trillium API"""
    return {
        "epoch": epoch,
        "vote_account_pubkey": vote_account,
        "total_inflation_reward": total_inflation_reward,
        "commission": commission,
        "mev_earned": mev_earned,
        "mev_commission": mev_commission,
        "rewards": rewards,
        "vote_cost": vote_cost,
    }


def epoch_rows(epoch: int, **kwargs) -> list[dict]:
    """Full per-epoch result set: some other validator plus ours"""
    return [
        trillium_row(epoch, vote_account=OTHER_VOTE_ACCOUNT, total_inflation_reward=99),
        trillium_row(epoch, **kwargs),
    ]


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeTrilliumSession:
    """
    Serves `history` for /validator_rewards/<vote account> and `epochs[n]` for
    /validator_rewards/<n>. Epochs missing from `epochs` return an empty set.
    `history` or an entry of `epochs` may be an exception to raise instead.
    """

    def __init__(self, history=None, epochs=None, status_codes=None):
        self.history = history if history is not None else []
        self.epochs = epochs or {}
        self.status_codes = status_codes or {}
        self.urls: list[str] = []

    def get(self, url: str, timeout=None) -> FakeResponse:
        assert timeout is not None, "requests must carry a timeout"
        self.urls.append(url)
        key = url.rsplit("/", 1)[1]
        if key.isdigit():
            payload = self.epochs.get(int(key), [])
        else:
            payload = self.history
        if isinstance(payload, requests.RequestException):
            raise payload
        return FakeResponse(payload, self.status_codes.get(key, 200))

    def epoch_requests(self) -> list[int]:
        return sorted(
            int(url.rsplit("/", 1)[1])
            for url in self.urls
            if url.rsplit("/", 1)[1].isdigit()
        )
