"""Abstract swap executor interface.

Defines the contract for swap execution. Both PaperSwapExecutor and
LiveSwapExecutor implement this ABC, so the trade coordinator is identical
regardless of trading mode.
"""

from abc import ABC, abstractmethod

from meanrev.execution.wallet import Wallet
from meanrev.trading.models import SwapRequest


class SwapExecutor(ABC):
    """Abstract base class for swap executors.

    The concrete executor (paper or live) is injected at startup based on
    TradingSettings.mode.
    """

    @abstractmethod
    async def execute_trade(self, request: SwapRequest, wallet: Wallet) -> str:
        """Execute a swap and return its transaction reference.

        Args:
            request: Input/output mints and atomic input amount.
            wallet: Wallet that pays for and signs the swap.

        Returns:
            Transaction reference (signature, or a simulated id in paper mode).

        Raises:
            SwapError: If the swap cannot be completed.
        """
        ...
