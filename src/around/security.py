import os
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

API_KEY_HEADER_NAME = "X-API-Key"

# Set by the upstream session layer once it has validated the caller's token.
CALLER_IDENTITY_HEADER_NAME = "X-Caller-Identity"

api_key_header = APIKeyHeader(name=API_KEY_HEADER_NAME, auto_error=False)
caller_identity_header = APIKeyHeader(name=CALLER_IDENTITY_HEADER_NAME, auto_error=False)


def get_api_key() -> str | None:
    return os.environ.get("API_KEY")


async def verify_api_key(
    api_key: Annotated[str | None, Depends(api_key_header)],
) -> str | None:
    expected_key = get_api_key()
    if not expected_key or api_key != expected_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return api_key


async def get_caller_identity(
    identity: Annotated[str | None, Depends(caller_identity_header)],
) -> str:
    """Return the already-authenticated username of the caller."""
    if identity is None or not identity.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing caller identity",
        )
    return identity.strip()


CallerIdentity = Annotated[str, Depends(get_caller_identity)]
