"""
Bearer-token identity for the JSON-RPC endpoint.

Every identity that may act on the ledger over HTTP is bound to a secret
token in `RpcConfig.api_tokens` (token -> identity, env NAMELEDGER_RPC_TOKENS).
A request's acting identity is resolved from `Authorization: Bearer <token>`:

- no Authorization header  -> anonymous (None); read-only methods still work,
                              methods that act as a caller fail Unauthorized
- unknown / malformed token -> HTTP 401 with a WWW-Authenticate challenge

Usage
-----
    from fastapi import Depends
    from nameledger.rpc.auth import caller_identity

    @router.post("")
    async def endpoint(request: Request, caller: Optional[str] = Depends(caller_identity)):
        ...
"""

from __future__ import annotations

import hmac
from typing import Mapping, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

REALM = "nameledger"

_bearer = HTTPBearer(auto_error=False)


def _challenge(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": f'Bearer realm="{REALM}"'},
    )


def resolve_identity(tokens: Mapping[str, str], token: str) -> Optional[str]:
    """Return the identity bound to `token`, comparing in constant time."""
    found: Optional[str] = None
    for known, identity in tokens.items():
        if hmac.compare_digest(token.encode("utf-8"), known.encode("utf-8")):
            found = identity
    return found


async def caller_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[str]:
    if request.headers.get("authorization") is None:
        return None
    if credentials is None or not credentials.credentials:
        raise _challenge("Malformed Authorization header")
    identity = resolve_identity(request.app.state.rpc_config.api_tokens, credentials.credentials)
    if identity is None:
        raise _challenge("Invalid token")
    return identity


__all__ = ["REALM", "caller_identity", "resolve_identity"]
