"""Dashboard summary for the operator UI: who is logged in, who administers the
console and whether the reporting service is configured."""
from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ...core.config import ADMIN_EMAIL
from ..auth.models import User
from ..auth.schemas import UserResponse
from ..auth.security import get_current_active_user
from ..credentials import service as credentials_service
from ..credentials.schemas import CredentialsStatus
from ..credentials.store import CredentialStore, get_credential_store

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


class DashboardResponse(BaseModel):
    user: UserResponse
    admin_email: Optional[str] = None
    credentials: CredentialsStatus


@router.get("", response_model=DashboardResponse)
async def read_dashboard(
    current_user: Annotated[User, Depends(get_current_active_user)],
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    return DashboardResponse(
        user=UserResponse.model_validate(current_user),
        admin_email=ADMIN_EMAIL or None,
        credentials=await credentials_service.check_credentials(store),
    )
