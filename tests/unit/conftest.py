import os

import pytest
from pytest_mock import MockerFixture

from tests.constants import DUMMY_IDENTITY, DUMMY_VOTE_ACCOUNT


@pytest.fixture(scope="function")
def mock_env(mocker: MockerFixture):
    mocker.patch.dict(
        os.environ,
        {
            "SOLANA_NETWORK": "mainnet-beta",
            "VOTE_ACCOUNT": DUMMY_VOTE_ACCOUNT,
            "IDENTITY": DUMMY_IDENTITY,
            "MONTHLY_EXPENSES": "1400",
            "MONTHLY_BILLING_DAY": "1",
            "VOTE_COST_REIMBURSEMENT": "0",
        },
    )
