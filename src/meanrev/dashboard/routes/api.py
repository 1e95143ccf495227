"""JSON API endpoints for bot status, price history and strategy configuration."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/status")
async def get_status(request: Request) -> JSONResponse:
    """Orchestrator status: loop state, last price/signal, guard state, trade counts."""
    orchestrator = request.app.state.orchestrator
    return JSONResponse(content=orchestrator.get_status())


@router.get("/history")
async def get_history(
    request: Request,
    limit: int = Query(default=100, ge=1, le=1000),
) -> JSONResponse:
    """Most recent price samples for the traded token, oldest-first."""
    price_store = request.app.state.price_store
    pair = request.app.state.pair
    samples = price_store.window(pair.base_mint, limit)

    result = [
        {
            "timestamp": s.timestamp,
            "price": str(s.price),
            "symbol": s.symbol,
        }
        for s in samples
    ]
    return JSONResponse(content=result)


@router.get("/config")
async def get_config(request: Request) -> JSONResponse:
    """Strategy configuration the bot is running with."""
    config = request.app.state.strategy_config
    pair = request.app.state.pair
    return JSONResponse(
        content={
            "symbol": pair.symbol,
            "base_mint": pair.base_mint,
            "quote_mint": pair.quote_mint,
            "mean_period": config.mean_period,
            "deviation_threshold": str(config.deviation_threshold),
            "trade_size": str(config.trade_size),
        }
    )
