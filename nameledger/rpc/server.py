"""
nameledger RPC server.

    create_app(cfg, ledger, state_path=None) -> FastAPI

Routes
------
POST /rpc      JSON-RPC 2.0 (single & batch), see nameledger.rpc.methods
GET  /healthz  {"ok": true, "version": ...}
GET  /version  version metadata

The app owns one wired `Registry` (app.state.ledger). When `state_path` is
given, the ledger snapshot is rewritten after every request that committed a
change (the store's commit counter moved) and once more on shutdown, so
`nameledger serve` and the other CLI commands share one state file. Callers
authenticate with bearer tokens configured in `RpcConfig.api_tokens`.
"""

from __future__ import annotations

import logging
import typing as t
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.cors import CORSMiddleware

from nameledger import __version__
from nameledger import logging as ledger_logging
from nameledger.boot import Registry, build_registry
from nameledger.version import version_metadata

from . import config as rpc_config
from . import methods as _methods  # noqa: F401  (registers handlers)
from .jsonrpc import router as jsonrpc_router

log = logging.getLogger(__name__)


def create_app(
    cfg: rpc_config.RpcConfig | None = None,
    ledger: Registry | None = None,
    *,
    state_path: Path | None = None,
) -> FastAPI:
    cfg = cfg or rpc_config.load_config()
    ledger = ledger or build_registry()

    def _persist() -> None:
        if state_path is not None:
            ledger.save(state_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> t.AsyncIterator[None]:
        log.info(
            "RPC server starting",
            extra={
                "host": cfg.host,
                "port": cfg.port,
                "admin": ledger.config.admin,
                "faucet": ledger.config.enable_faucet,
                "identities": sorted(set(cfg.api_tokens.values())),
            },
        )
        if not cfg.api_tokens:
            log.warning("no RPC tokens configured (NAMELEDGER_RPC_TOKENS); only read-only methods will succeed")
        try:
            yield
        finally:
            _persist()
            ledger.close()
            log.info("RPC server stopped")

    app = FastAPI(
        title="nameledger JSON-RPC",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.ledger = ledger
    app.state.rpc_config = cfg

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_allow_origins or [],
        allow_credentials=True,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,
    )

    if state_path is not None:

        @app.middleware("http")
        async def _persist_after_rpc(
            request: Request, call_next: t.Callable[[Request], t.Awaitable[Response]]
        ) -> Response:
            before = ledger.store.commit_count
            response = await call_next(request)
            if ledger.store.commit_count != before:
                await run_in_threadpool(_persist)
            return response

    app.include_router(jsonrpc_router, prefix="/rpc")

    @app.get("/healthz")
    async def healthz() -> JSONResponse:
        return JSONResponse({"ok": True, "version": __version__})

    @app.get("/version")
    async def version() -> JSONResponse:
        return JSONResponse(version_metadata())

    return app


# -----------------------------------------------------------------------------
# Entrypoint (uvicorn)
# -----------------------------------------------------------------------------
def serve(
    cfg: rpc_config.RpcConfig | None = None,
    ledger: Registry | None = None,
    *,
    state_path: Path | None = None,
) -> None:
    cfg = cfg or rpc_config.load_config()
    ledger_logging.configure(json=cfg.log_json, level=cfg.log_level)
    app = create_app(cfg, ledger, state_path=state_path)
    import uvicorn

    uvicorn.run(app, host=cfg.host, port=cfg.port, log_level=cfg.log_level.lower(), workers=1)


def main() -> None:
    serve()


if __name__ == "__main__":
    main()
