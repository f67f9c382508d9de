"""Admin endpoints to store, inspect and delete the reporting service credentials."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError

from ...common.forms import read_body
from ..auth.security import get_current_active_admin_user
from . import service as credentials_service
from .schemas import CredentialsIn, CredentialsStatus
from .store import CredentialStore, get_credential_store

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/credentials",
    tags=["Credentials"],
    dependencies=[Depends(get_current_active_admin_user)],
)


@router.get("", response_model=CredentialsStatus)
async def get_credentials_status(
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    return await credentials_service.check_credentials(store)


@router.post("", response_model=CredentialsStatus)
async def store_credentials(
    request: Request,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """Accepts ``apiKey``, ``apiSecret`` and ``reportsUrl`` as JSON or form fields."""
    try:
        credentials = CredentialsIn.model_validate(await read_body(request))
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing data")
    if not credentials.is_complete():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing data")
    await credentials_service.store_credentials(store, credentials)
    return await credentials_service.check_credentials(store)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_credentials(
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    await credentials_service.delete_credentials(store)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
