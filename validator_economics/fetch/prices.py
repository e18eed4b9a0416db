"""
An interface for fetching prices.
Currently, only price feed is CoinPaprika's Free tier API.
"""

import requests
from coinpaprika import client as cp
from coinpaprika.exceptions import CoinpaprikaAPIException

from validator_economics.constants import SOL_COIN_ID
from validator_economics.logger import set_log

log = set_log(__name__)


class PriceLookupError(RuntimeError):
    """No usable price could be obtained. Fatal to the run."""


def usd_price(client: cp.Client, coin_id: str = SOL_COIN_ID) -> float:
    """Current USD price of `coin_id` from the CoinPaprika ticker endpoint"""
    log.info("requesting current price for token=%s", coin_id)
    try:
        ticker = client.ticker(coin_id, quotes="USD")
    except (CoinpaprikaAPIException, requests.RequestException, ValueError) as err:
        raise PriceLookupError(f"price request for {coin_id} failed: {err}") from err
    try:
        price = float(ticker["quotes"]["USD"]["price"])
    except (KeyError, TypeError, ValueError) as err:
        raise PriceLookupError(
            f"invalid ticker response for {coin_id} - got {ticker}"
        ) from err
    if not price > 0:
        raise PriceLookupError(f"non-positive price {price} for {coin_id}")
    return price


def sol_usd_price(client: cp.Client | None = None) -> float:
    """Current SOL/USD exchange rate"""
    return usd_price(client or cp.Client(), SOL_COIN_ID)
