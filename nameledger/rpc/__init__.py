"""
nameledger JSON-RPC package.

Exposes:
- create_app(cfg, ledger): FastAPI app serving POST /rpc and GET /healthz
- serve(): run the app under uvicorn
"""

from .server import create_app, serve

__all__ = ["create_app", "serve"]
