"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from meanrev.models import StrategyConfig, TradingPair

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


class StrategySettings(BaseSettings):
    """Mean-reversion strategy parameters.

    ``input_mint`` is the traded (base) token, ``output_mint`` the token its
    price is quoted in.
    """

    model_config = SettingsConfigDict(env_prefix="STRATEGY_")

    input_mint: str = SOL_MINT
    output_mint: str = USDC_MINT
    symbol: str = "SOL"
    mean_period: int = Field(default=100, ge=2)  # Samples in the statistical window
    deviation_threshold: Decimal = Field(default=Decimal("2"), gt=0)  # In std devs
    trade_size: Decimal = Field(default=Decimal("0.01"), gt=0)  # Input-token units
    poll_interval: float = Field(default=3.0, gt=0)  # Seconds between price polls
    history_capacity: int = Field(default=1000, ge=1)  # Samples kept per instrument

    def to_strategy_config(self) -> StrategyConfig:
        return StrategyConfig(
            mean_period=self.mean_period,
            deviation_threshold=self.deviation_threshold,
            trade_size=self.trade_size,
        )

    def to_trading_pair(self) -> TradingPair:
        return TradingPair(
            base_mint=self.input_mint,
            quote_mint=self.output_mint,
            symbol=self.symbol,
        )


class TradingSettings(BaseSettings):
    """Execution mode and swap parameters."""

    model_config = SettingsConfigDict(env_prefix="TRADING_")

    mode: Literal["paper", "live"] = "paper"
    slippage_bps: int = Field(default=50, ge=0)  # 0.5%
    confirm_timeout: float = Field(default=60.0, gt=0)  # Seconds to wait for finalization


class JupiterSettings(BaseSettings):
    """Jupiter swap API connection settings."""

    model_config = SettingsConfigDict(env_prefix="JUPITER_")

    base_url: str = "https://lite-api.jup.ag"
    api_key: SecretStr = SecretStr("")
    timeout: float = 10.0


class WalletSettings(BaseSettings):
    """Solana wallet and RPC settings."""

    model_config = SettingsConfigDict(env_prefix="WALLET_")

    public_key: str = ""
    private_key: SecretStr = SecretStr("")  # Base58-encoded 64-byte keypair
    rpc_url: str = "https://api.mainnet-beta.solana.com"


class StorageSettings(BaseSettings):
    """Price history snapshot location."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: str = "logs"
    history_file: str = "price_history.json"

    @property
    def history_path(self) -> Path:
        return Path(self.data_dir) / self.history_file


class DashboardSettings(BaseSettings):
    """Status dashboard server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "127.0.0.1"
    port: int = 8080
    enabled: bool = False


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_dir: str | None = "logs"  # None disables the daily log file
    strategy: StrategySettings = StrategySettings()
    trading: TradingSettings = TradingSettings()
    jupiter: JupiterSettings = JupiterSettings()
    wallet: WalletSettings = WalletSettings()
    storage: StorageSettings = StorageSettings()
    dashboard: DashboardSettings = DashboardSettings()
