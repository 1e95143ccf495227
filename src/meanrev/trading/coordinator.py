"""Trade execution coordinator.

Turns a BUY/SELL signal into a swap under the TradeGuard:

- guard busy: the attempt is SKIPPED (dropped, never queued or retried)
- otherwise: resolve direction and amount, execute the swap, and release
  the guard in ``finally`` whether the swap succeeded, failed, or raised.

Direction mapping: SELL spends the base token for the quote token (the
configured pair as-is); BUY inverts the pair, spending the quote token to
acquire the base token. ``trade_size`` is denominated in the swap's input
token and scaled by that token's decimals.
"""

from meanrev.exceptions import SwapError
from meanrev.exchange.types import to_atomic_units
from meanrev.execution.executor import SwapExecutor
from meanrev.execution.wallet import Wallet
from meanrev.logging import LogCategory, get_logger
from meanrev.market_data.price_source import TokenDecimalsCache
from meanrev.models import StrategyConfig, TradingPair
from meanrev.signals.models import Signal
from meanrev.trading.guard import TradeGuard
from meanrev.trading.models import SwapRequest, TradeOutcome, TradeStatus

logger = get_logger(__name__)


class TradeCoordinator:
    """Executes at most one trade at a time.

    Args:
        executor: Paper or live swap executor.
        guard: The in-flight guard shared with the strategy loop.
        pair: Configured base/quote pair.
        config: Strategy parameters (trade size).
        decimals: Startup-loaded token decimals.
        wallet: Wallet that pays for and signs swaps.
    """

    def __init__(
        self,
        executor: SwapExecutor,
        guard: TradeGuard,
        pair: TradingPair,
        config: StrategyConfig,
        decimals: TokenDecimalsCache,
        wallet: Wallet,
    ) -> None:
        self._executor = executor
        self._guard = guard
        self._pair = pair
        self._config = config
        self._decimals = decimals
        self._wallet = wallet
        self._counts: dict[TradeStatus, int] = {status: 0 for status in TradeStatus}
        self._last_outcome: TradeOutcome | None = None

    @property
    def guard(self) -> TradeGuard:
        return self._guard

    @property
    def last_outcome(self) -> TradeOutcome | None:
        return self._last_outcome

    def get_counts(self) -> dict[str, int]:
        """Number of trade attempts per status, keyed by status value."""
        return {status.value: count for status, count in self._counts.items()}

    def build_request(self, signal: Signal) -> SwapRequest:
        """Resolve a signal into input/output mints and an atomic amount.

        Raises:
            ValueError: If ``signal`` is NONE.
            SwapError: If the trade size rounds down to zero atomic units.
        """
        if signal is Signal.BUY:
            input_mint, output_mint = self._pair.quote_mint, self._pair.base_mint
        elif signal is Signal.SELL:
            input_mint, output_mint = self._pair.base_mint, self._pair.quote_mint
        else:
            raise ValueError(f"Cannot trade on signal {signal}")

        amount = to_atomic_units(self._config.trade_size, self._decimals.get(input_mint))
        if amount <= 0:
            raise SwapError(
                f"Trade size {self._config.trade_size} is below one atomic unit of {input_mint}"
            )
        return SwapRequest(
            input_mint=input_mint,
            output_mint=output_mint,
            amount=amount,
            ui_amount=self._config.trade_size,
            signal=signal,
        )

    async def execute(self, signal: Signal) -> TradeOutcome:
        """Attempt one trade for ``signal``.

        Never raises for swap failures: they are logged and reported as a
        FAILED outcome. The guard is always released.

        Raises:
            ValueError: If ``signal`` is NONE.
        """
        if signal is Signal.NONE:
            raise ValueError("Cannot trade on signal NONE")

        if not self._guard.try_acquire():
            logger.info(
                "trade_in_progress_skipping",
                category=LogCategory.TRADE,
                signal=signal.value,
                symbol=self._pair.symbol,
            )
            return self._record(TradeOutcome(status=TradeStatus.SKIPPED, signal=signal))

        request: SwapRequest | None = None
        try:
            request = self.build_request(signal)
            logger.info(
                "executing_trade",
                category=LogCategory.TRADE,
                signal=signal.value,
                symbol=self._pair.symbol,
                amount=str(request.ui_amount),
                input_mint=request.input_mint,
                output_mint=request.output_mint,
            )
            tx_reference = await self._executor.execute_trade(request, self._wallet)
        except Exception as e:
            logger.error(
                "trade_execution_failed",
                category=LogCategory.ERROR,
                signal=signal.value,
                symbol=self._pair.symbol,
                error=str(e),
                exc_info=not isinstance(e, SwapError),
            )
            return self._record(
                TradeOutcome(
                    status=TradeStatus.FAILED,
                    signal=signal,
                    request=request,
                    error=str(e),
                )
            )
        finally:
            self._guard.release()

        logger.info(
            "trade_executed",
            category=LogCategory.TRADE,
            signal=signal.value,
            symbol=self._pair.symbol,
            tx_reference=tx_reference,
        )
        return self._record(
            TradeOutcome(
                status=TradeStatus.EXECUTED,
                signal=signal,
                request=request,
                tx_reference=tx_reference,
            )
        )

    def _record(self, outcome: TradeOutcome) -> TradeOutcome:
        self._counts[outcome.status] += 1
        self._last_outcome = outcome
        return outcome
