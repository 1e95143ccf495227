"""Main bot orchestrator -- runs the poll-evaluate-trade loop.

Startup:
  1. Load token decimals for both mints (fatal on failure)
  2. Restore the persisted price history (degrades to empty, never fatal)
  3. Log the strategy configuration

Each iteration:
  1. PRICE: Quote the current price of the base token
  2. RECORD: Append it to the rolling history (snapshot persisted)
  3. ANALYZE: Compute mean, std dev and z-score over the window
  4. SIGNAL: Evaluate BUY / SELL / NONE
  5. TRADE: Dispatch the trade in the background under the TradeGuard

Trades run as background tasks so polling continues while a swap waits for
confirmation; the guard drops signals that arrive in the meantime.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal
from typing import Any

from meanrev.exceptions import PersistenceError, QuoteError
from meanrev.history.store import PriceStore, RestoreOutcome
from meanrev.logging import LogCategory, get_logger
from meanrev.market_data.price_source import PriceSource, TokenDecimalsCache
from meanrev.models import PriceSample, StrategyConfig, TradingPair, now_ms
from meanrev.signals.mean_reversion import compute_zscore, evaluate
from meanrev.signals.models import Signal
from meanrev.trading.coordinator import TradeCoordinator
from meanrev.trading.models import TradeOutcome

logger = get_logger(__name__)


class Orchestrator:
    """Single-instrument mean-reversion trading loop.

    Args:
        pair: Configured base/quote pair.
        config: Strategy parameters.
        price_source: Current-price lookup.
        price_store: Rolling, persisted price history.
        coordinator: Guarded trade executor.
        decimals: Token decimals cache, loaded at startup.
        poll_interval: Seconds between loop iterations.
        mode: Trading mode label for logging and status ("paper" or "live").
    """

    def __init__(
        self,
        pair: TradingPair,
        config: StrategyConfig,
        price_source: PriceSource,
        price_store: PriceStore,
        coordinator: TradeCoordinator,
        decimals: TokenDecimalsCache,
        poll_interval: float = 3.0,
        mode: str = "paper",
    ) -> None:
        self._pair = pair
        self._config = config
        self._price_source = price_source
        self._price_store = price_store
        self._coordinator = coordinator
        self._decimals = decimals
        self._poll_interval = poll_interval
        self._mode = mode
        self._running = False
        self._stop_event = asyncio.Event()
        self._trade_tasks: set[asyncio.Task[TradeOutcome]] = set()
        self._last_price: Decimal | None = None
        self._last_signal: Signal = Signal.NONE
        self._restore_outcome: RestoreOutcome | None = None
        self._cycles = 0

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Run startup, then loop until stop() is called.

        Raises:
            StartupError: If token decimals cannot be loaded.
        """
        logger.info(
            "bot_starting",
            category=LogCategory.SYSTEM,
            symbol=self._pair.symbol,
            mode=self._mode,
        )
        await self.initialize()
        await self.run()

    async def run(self) -> None:
        """Loop until stop() is called. Expects initialize() to have completed."""
        self._running = True
        try:
            await self._run_loop()
        finally:
            self._running = False
            await self.wait_for_trades()
            logger.info("bot_stopped", category=LogCategory.SYSTEM)

    async def initialize(self) -> RestoreOutcome:
        """Load token decimals and restore price history.

        Raises:
            StartupError: If token decimals cannot be loaded.
        """
        await self._decimals.load([self._pair.base_mint, self._pair.quote_mint])

        self._restore_outcome = await self._price_store.restore()
        if self._restore_outcome is RestoreOutcome.RESTORED:
            logger.info(
                "price_history_loaded",
                category=LogCategory.SYSTEM,
                samples=self._price_store.size(self._pair.base_mint),
            )
        elif self._restore_outcome is RestoreOutcome.DEGRADED:
            logger.warning("price_history_degraded", category=LogCategory.SYSTEM)
        else:
            logger.info("price_history_fresh", category=LogCategory.SYSTEM)

        logger.info(
            "strategy_configuration",
            category=LogCategory.SYSTEM,
            token=self._pair.symbol,
            mean_period=self._config.mean_period,
            deviation_threshold=str(self._config.deviation_threshold),
            trade_size=str(self._config.trade_size),
            poll_interval=self._poll_interval,
        )
        return self._restore_outcome

    async def stop(self) -> None:
        """Signal the loop to stop after the current iteration."""
        logger.info("bot_stopping", category=LogCategory.SYSTEM)
        self._running = False
        self._stop_event.set()

    async def _run_loop(self) -> None:
        """Poll on a fixed cadence; per-iteration errors never end the loop."""
        while not self._stop_event.is_set():
            try:
                await self.run_cycle()
            except Exception as e:
                logger.error(
                    "cycle_error",
                    category=LogCategory.ERROR,
                    error=str(e),
                    exc_info=True,
                )

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                pass

    async def run_cycle(self) -> Signal:
        """One iteration: price, record, analyze, signal, dispatch trade.

        Returns:
            The signal evaluated this iteration (NONE if the price was unavailable).
        """
        self._cycles += 1

        try:
            price = await self._price_source.get_current_price(self._pair)
        except QuoteError as e:
            logger.error("price_fetch_failed", category=LogCategory.ERROR, error=str(e))
            return Signal.NONE

        sample = PriceSample(
            timestamp=now_ms(),
            price=price,
            instrument_id=self._pair.base_mint,
            symbol=self._pair.symbol,
        )
        try:
            await self._price_store.append(self._pair.base_mint, sample)
        except PersistenceError as e:
            logger.error(
                "price_history_save_failed",
                category=LogCategory.ERROR,
                error=str(e),
            )

        self._last_price = price
        logger.info(
            "price_update",
            category=LogCategory.PRICE,
            symbol=self._pair.symbol,
            price=str(price),
        )

        window = self._price_store.window(self._pair.base_mint, self._config.mean_period)
        stats = compute_zscore([s.price for s in window], self._config.mean_period)
        if stats is not None:
            logger.info(
                "mean_reversion_stats",
                category=LogCategory.ANALYSIS,
                mean=f"{stats.mean:.4f}",
                std_dev=f"{stats.std_dev:.4f}",
                z_score=f"{stats.z_score:.4f}" if stats.z_score is not None else None,
            )
        else:
            logger.debug(
                "collecting_samples",
                category=LogCategory.ANALYSIS,
                have=len(window),
                need=self._config.mean_period,
            )

        signal = evaluate(window, self._config)
        self._last_signal = signal
        if signal is not Signal.NONE:
            logger.info(
                "signal_detected",
                category=LogCategory.SIGNAL,
                signal=signal.value,
                symbol=self._pair.symbol,
                price=str(price),
            )
            self._dispatch_trade(signal)
        return signal

    def _dispatch_trade(self, signal: Signal) -> None:
        task = asyncio.create_task(self._coordinator.execute(signal))
        self._trade_tasks.add(task)
        task.add_done_callback(self._trade_tasks.discard)

    async def wait_for_trades(self) -> list[TradeOutcome]:
        """Wait for all background trade tasks and return their outcomes."""
        if not self._trade_tasks:
            return []
        results = await asyncio.gather(*list(self._trade_tasks), return_exceptions=True)
        outcomes: list[TradeOutcome] = []
        for result in results:
            if isinstance(result, BaseException):
                logger.error(
                    "trade_task_error",
                    category=LogCategory.ERROR,
                    error=str(result),
                )
            else:
                outcomes.append(result)
        return outcomes

    def get_status(self) -> dict[str, Any]:
        """Return a JSON-friendly status snapshot of the bot."""
        last_outcome = self._coordinator.last_outcome
        return {
            "running": self._running,
            "mode": self._mode,
            "symbol": self._pair.symbol,
            "base_mint": self._pair.base_mint,
            "quote_mint": self._pair.quote_mint,
            "cycles": self._cycles,
            "samples": self._price_store.size(self._pair.base_mint),
            "last_price": str(self._last_price) if self._last_price is not None else None,
            "last_signal": self._last_signal.value,
            "guard_state": self._coordinator.guard.state.value,
            "restore_outcome": (
                self._restore_outcome.value if self._restore_outcome is not None else None
            ),
            "trades": self._coordinator.get_counts(),
            "last_trade": (
                {
                    "status": last_outcome.status.value,
                    "signal": last_outcome.signal.value,
                    "tx_reference": last_outcome.tx_reference,
                    "error": last_outcome.error,
                }
                if last_outcome is not None
                else None
            ),
        }
