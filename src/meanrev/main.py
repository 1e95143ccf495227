"""Entry point for the mean-reversion swap bot.

Wires all components together, optionally embeds the FastAPI status
dashboard, and starts the orchestrator. When the dashboard is enabled the
bot and dashboard share a single asyncio event loop via uvicorn's
programmatic API and FastAPI's lifespan context manager.

Handles SIGINT/SIGTERM for graceful shutdown.

Component wiring order (in _build_components):
1. JupiterClient (quotes, token info, swap build)
2. TokenDecimalsCache (loaded once at startup)
3. PriceSource (current price of the base token)
4. PriceStore over JsonSnapshotStorage (rolling history)
5. Wallet (signing in live mode, watch-only in paper mode)
6. SwapExecutor (PaperSwapExecutor or LiveSwapExecutor based on mode)
7. TradeGuard + TradeCoordinator
8. Orchestrator (poll-evaluate-trade loop)
"""

import asyncio
import signal
import sys
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from meanrev.config import AppSettings
from meanrev.exceptions import StartupError
from meanrev.exchange.jupiter_client import JupiterClient
from meanrev.execution.executor import SwapExecutor
from meanrev.execution.wallet import Wallet
from meanrev.history.snapshot import JsonSnapshotStorage
from meanrev.history.store import PriceStore
from meanrev.logging import LogCategory, get_logger, setup_logging
from meanrev.market_data.price_source import PriceSource, TokenDecimalsCache
from meanrev.orchestrator import Orchestrator
from meanrev.trading.coordinator import TradeCoordinator
from meanrev.trading.guard import TradeGuard


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all bot components from settings.

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances. ``closeables`` lists the
        HTTP clients that must be closed on shutdown.

    Raises:
        StartupError: If live mode is requested without a signing wallet.
    """
    logger = get_logger("meanrev.main")

    pair = settings.strategy.to_trading_pair()
    strategy_config = settings.strategy.to_strategy_config()

    # 1-3. Quotes, decimals and pricing
    quote_client = JupiterClient(settings.jupiter, slippage_bps=settings.trading.slippage_bps)
    decimals = TokenDecimalsCache(quote_client)
    price_source = PriceSource(quote_client, decimals)

    # 4. Rolling history
    price_store = PriceStore(
        JsonSnapshotStorage(settings.storage.history_path),
        capacity=settings.strategy.history_capacity,
    )

    # 5. Wallet
    wallet = Wallet.from_settings(settings.wallet)
    closeables: list[Any] = [quote_client]

    # 6. Executor based on mode
    executor: SwapExecutor
    if settings.trading.mode == "paper":
        from meanrev.execution.paper_executor import PaperSwapExecutor

        executor = PaperSwapExecutor(quote_client)
    else:
        from meanrev.execution.live_executor import LiveSwapExecutor
        from meanrev.execution.rpc import SolanaRpcClient

        if not wallet.can_sign:
            raise StartupError("Live mode requires WALLET_PRIVATE_KEY")
        rpc_client = SolanaRpcClient(settings.wallet.rpc_url)
        closeables.append(rpc_client)
        executor = LiveSwapExecutor(
            quote_client,
            rpc_client,
            confirm_timeout=settings.trading.confirm_timeout,
        )

    if not wallet.public_key:
        logger.warning(
            "no_wallet_configured",
            category=LogCategory.SYSTEM,
            mode=settings.trading.mode,
            note="Paper fills are simulated; no wallet address is attached.",
        )

    # 7. Guarded trade execution
    guard = TradeGuard()
    coordinator = TradeCoordinator(
        executor=executor,
        guard=guard,
        pair=pair,
        config=strategy_config,
        decimals=decimals,
        wallet=wallet,
    )

    # 8. Orchestrator
    orchestrator = Orchestrator(
        pair=pair,
        config=strategy_config,
        price_source=price_source,
        price_store=price_store,
        coordinator=coordinator,
        decimals=decimals,
        poll_interval=settings.strategy.poll_interval,
        mode=settings.trading.mode,
    )

    return {
        "pair": pair,
        "strategy_config": strategy_config,
        "quote_client": quote_client,
        "decimals": decimals,
        "price_source": price_source,
        "price_store": price_store,
        "wallet": wallet,
        "executor": executor,
        "guard": guard,
        "coordinator": coordinator,
        "orchestrator": orchestrator,
        "closeables": closeables,
    }


async def _close_all(components: dict[str, Any]) -> None:
    for client in components["closeables"]:
        await client.close()


def _setup_signal_handlers(orchestrator: Orchestrator) -> None:
    """Register SIGINT/SIGTERM handlers for graceful shutdown.

    Must be called after the asyncio event loop is running.
    """
    logger = get_logger("meanrev.main")
    loop = asyncio.get_running_loop()

    def _graceful_handler() -> None:
        logger.info("graceful_shutdown_signal", category=LogCategory.SYSTEM)
        asyncio.create_task(orchestrator.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage bot lifecycle within the FastAPI application.

    On startup: initializes the orchestrator (StartupError aborts the
    server) and runs the trading loop as a background task.

    On shutdown: stops the loop, waits for it, closes HTTP clients.
    """
    logger = get_logger("meanrev.main")
    components = app.state.components
    orchestrator: Orchestrator = components["orchestrator"]

    app.state.orchestrator = orchestrator
    app.state.price_store = components["price_store"]
    app.state.pair = components["pair"]
    app.state.strategy_config = components["strategy_config"]

    await orchestrator.initialize()
    bot_task = asyncio.create_task(orchestrator.run())
    logger.info("lifespan_started", category=LogCategory.SYSTEM)

    yield

    await orchestrator.stop()
    try:
        await bot_task
    except asyncio.CancelledError:
        pass
    await _close_all(components)
    logger.info("mean_reversion_bot_stopped", category=LogCategory.SYSTEM)


async def run() -> None:
    """Run the mean-reversion bot.

    When the dashboard is enabled (DASHBOARD_ENABLED=true), the bot runs
    inside the uvicorn server's event loop and the lifespan manages it.
    Otherwise the bot runs directly (default, headless).

    Raises:
        StartupError: If startup metadata or wallet configuration is unusable.
    """
    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_dir)
    logger = get_logger("meanrev.main")

    components = _build_components(settings)

    if settings.dashboard.enabled:
        from meanrev.dashboard.app import create_dashboard_app

        app = create_dashboard_app(lifespan=lifespan)
        app.state.components = components

        logger.info(
            "starting_with_dashboard",
            category=LogCategory.SYSTEM,
            host=settings.dashboard.host,
            port=settings.dashboard.port,
            mode=settings.trading.mode,
        )
        config = uvicorn.Config(
            app,
            host=settings.dashboard.host,
            port=settings.dashboard.port,
            log_level="warning",  # Suppress uvicorn access logs
        )
        server = uvicorn.Server(config)
        await server.serve()
    else:
        _setup_signal_handlers(components["orchestrator"])
        logger.info(
            "starting_without_dashboard",
            category=LogCategory.SYSTEM,
            mode=settings.trading.mode,
        )
        try:
            await components["orchestrator"].start()
        finally:
            await _close_all(components)
            logger.info("mean_reversion_bot_stopped", category=LogCategory.SYSTEM)


def main() -> None:
    """Synchronous entry point."""
    try:
        asyncio.run(run())
    except StartupError as e:
        get_logger("meanrev.main").critical(
            "bot_crashed",
            category=LogCategory.ERROR,
            error=str(e),
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
