"""Config for validator profitability reporting."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from validator_economics.constants import LOG_CONFIG_FILE, PROJECT_ROOT, TRILLIUM_API_URL

load_dotenv()

# base58 alphabet, 32 to 44 characters for an ed25519 public key
PUBKEY_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


class ConfigurationError(ValueError):
    """Invalid or missing configuration. Fatal to the process."""


class Network(Enum):
    """Solana clusters supported by the reporting."""

    MAINNET = "mainnet-beta"
    TESTNET = "testnet"
    DEVNET = "devnet"

    def default_rpc_url(self) -> str:
        """Public RPC endpoint of the cluster."""
        match self:
            case Network.MAINNET:
                return "https://api.mainnet-beta.solana.com"
            case Network.TESTNET:
                return "https://api.testnet.solana.com"
            case Network.DEVNET:
                return "https://api.devnet.solana.com"
            case _:
                raise ValueError(f"No rpc url set up for network {self}.")

    def seconds_per_slot(self) -> float:
        """Nominal slot duration, used to extrapolate slots from wall clock time."""
        match self:
            case Network.MAINNET | Network.TESTNET | Network.DEVNET:
                return 0.4
            case _:
                raise ValueError(f"No slot duration set up for network {self}.")


def _env_float(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        return float(raw)
    except ValueError as err:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from err


def _env_int(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except ValueError as err:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from err


@dataclass(frozen=True)
class NodeConfig:
    """Configuration for the Solana JSON-RPC node."""

    network: Network
    rpc_url: str
    timeout: float

    @staticmethod
    def from_network(network: Network) -> NodeConfig:
        """Initialize node config from environment variables."""
        rpc_url = os.environ.get("RPC_URL") or network.default_rpc_url()
        timeout = _env_float("HTTP_TIMEOUT_SECONDS", "30")
        return NodeConfig(network=network, rpc_url=rpc_url, timeout=timeout)


@dataclass(frozen=True)
class RewardSourceConfig:
    """Configuration for the Trillium reward data source."""

    api_url: str
    max_workers: int
    timeout: float

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ConfigurationError(
                f"TRILLIUM_MAX_WORKERS must be at least 1, got {self.max_workers}"
            )

    @staticmethod
    def from_env() -> RewardSourceConfig:
        """Initialize reward source config from environment variables."""
        return RewardSourceConfig(
            api_url=os.environ.get("TRILLIUM_API_URL", TRILLIUM_API_URL).rstrip("/"),
            max_workers=_env_int("TRILLIUM_MAX_WORKERS", "4"),
            timeout=_env_float("HTTP_TIMEOUT_SECONDS", "30"),
        )


@dataclass(frozen=True)
class ProfitabilityConfig:
    """Operator specific parameters of the profitability computation.

    Attributes:
    vote_account -- vote account whose rewards are accounted
    identity -- validator identity paying the vote transaction fees
    monthly_expenses -- fixed expenses per billing cycle in USD
    billing_day -- day of month on which a billing cycle starts
    vote_cost_reimbursement -- percentage of vote costs reimbursed to the operator
    """

    vote_account: str
    identity: str
    monthly_expenses: float
    billing_day: int = 1
    vote_cost_reimbursement: float = 0.0

    def __post_init__(self) -> None:
        if not self.vote_account or not self.identity:
            raise ConfigurationError(
                "Missing config: VOTE_ACCOUNT and IDENTITY are required"
            )
        for name, key in (
            ("VOTE_ACCOUNT", self.vote_account),
            ("IDENTITY", self.identity),
        ):
            if not PUBKEY_PATTERN.match(key):
                raise ConfigurationError(f"Invalid {name} public key {key!r}")
        if not math.isfinite(self.monthly_expenses) or self.monthly_expenses < 0:
            raise ConfigurationError("Invalid MONTHLY_EXPENSES provided.")
        if not 1 <= self.billing_day <= 31:
            raise ConfigurationError("Invalid MONTHLY_BILLING_DAY provided.")
        if not 0 <= self.vote_cost_reimbursement <= 100:
            raise ConfigurationError(
                "Invalid VOTE_COST_REIMBURSEMENT provided. Must be between 0 and 100."
            )

    @staticmethod
    def from_env(**overrides: str | int | float | None) -> ProfitabilityConfig:
        """
        Initialize profitability config from environment variables.
        Keyword arguments that are not None (e.g. parsed command line flags)
        take precedence over the environment.
        """
        monthly_expenses = overrides.get("monthly_expenses")
        if monthly_expenses is None:
            if not os.environ.get("MONTHLY_EXPENSES"):
                raise ConfigurationError("Missing config: MONTHLY_EXPENSES is required")
            monthly_expenses = _env_float("MONTHLY_EXPENSES", "0")
        values = {
            "vote_account": os.environ.get("VOTE_ACCOUNT", ""),
            "identity": os.environ.get("IDENTITY", ""),
            "billing_day": _env_int("MONTHLY_BILLING_DAY", "1"),
            "vote_cost_reimbursement": _env_float("VOTE_COST_REIMBURSEMENT", "0"),
        }
        values.update(
            {
                key: value
                for key, value in overrides.items()
                if key in values and value is not None
            }
        )
        return ProfitabilityConfig(monthly_expenses=float(monthly_expenses), **values)  # type: ignore[arg-type]


@dataclass(frozen=True)
class IOConfig:
    """Configuration of input and output."""

    project_root_dir: Path
    log_config_file: Path
    slack_channel: str | None
    slack_token: str | None

    @staticmethod
    def from_env() -> IOConfig:
        """Initialize io config from environment variables."""
        slack_channel = os.getenv("SLACK_CHANNEL", None)
        slack_token = os.getenv("SLACK_TOKEN", None)

        return IOConfig(
            project_root_dir=PROJECT_ROOT,
            log_config_file=LOG_CONFIG_FILE,
            slack_channel=slack_channel,
            slack_token=slack_token,
        )


@dataclass(frozen=True)
class ReportingConfig:
    """Full configuration for a profitability report run."""

    profitability_config: ProfitabilityConfig
    node_config: NodeConfig
    reward_source_config: RewardSourceConfig
    io_config: IOConfig

    @staticmethod
    def from_network(
        network: Network, **overrides: str | int | float | None
    ) -> ReportingConfig:
        """Initialize reporting config for a given network."""

        return ReportingConfig(
            profitability_config=ProfitabilityConfig.from_env(**overrides),
            node_config=NodeConfig.from_network(network),
            reward_source_config=RewardSourceConfig.from_env(),
            io_config=IOConfig.from_env(),
        )

    @staticmethod
    def from_env(**overrides: str | int | float | None) -> ReportingConfig:
        """Initialize reporting config for the network named by `SOLANA_NETWORK`."""
        raw_network = os.environ.get("SOLANA_NETWORK", Network.MAINNET.value)
        try:
            network = Network(raw_network)
        except ValueError as err:
            raise ConfigurationError(f"Unknown SOLANA_NETWORK {raw_network!r}") from err
        return ReportingConfig.from_network(network, **overrides)
