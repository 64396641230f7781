"""
API key routes.

The key itself is never echoed back; callers only learn whether one is set.
"""

from fastapi import APIRouter, Depends

from ..core import CredentialProvider, get_credential_provider, get_logger
from ..models import CredentialStatus, CredentialUpdate

router = APIRouter(tags=["credential"])
logger = get_logger(__name__, component="credential_routes")


@router.get("/credential", response_model=CredentialStatus)
async def credential_status(credentials: CredentialProvider = Depends(get_credential_provider)):
    has_credential = credentials.has_credential()
    return CredentialStatus(has_credential=has_credential, credential_required=not has_credential)


@router.put("/credential", response_model=CredentialStatus)
async def set_credential(
    payload: CredentialUpdate,
    credentials: CredentialProvider = Depends(get_credential_provider),
):
    credentials.set(payload.api_key.strip())
    logger.info("API key updated")
    return CredentialStatus(has_credential=credentials.has_credential())


@router.delete("/credential", response_model=CredentialStatus)
async def clear_credential(credentials: CredentialProvider = Depends(get_credential_provider)):
    credentials.clear()
    logger.info("API key cleared")
    return CredentialStatus(has_credential=credentials.has_credential(), credential_required=True)
