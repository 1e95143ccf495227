"""Swap execution layer -- paper and live executors, wallet, Solana RPC."""

from meanrev.execution.executor import SwapExecutor
from meanrev.execution.live_executor import LiveSwapExecutor
from meanrev.execution.paper_executor import PaperFill, PaperSwapExecutor
from meanrev.execution.rpc import SolanaRpcClient
from meanrev.execution.wallet import Wallet

__all__ = [
    "LiveSwapExecutor",
    "PaperFill",
    "PaperSwapExecutor",
    "SolanaRpcClient",
    "SwapExecutor",
    "Wallet",
]
