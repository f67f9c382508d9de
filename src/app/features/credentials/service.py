"""Admin actions on the stored reporting service credentials."""
import logging
from typing import Optional

from ...core.config import CREDENTIALS_KEY
from .schemas import CredentialsIn, CredentialsStatus
from .store import CredentialStore

logger = logging.getLogger(__name__)


def mask_secret(value: Optional[str], visible: int = 4) -> Optional[str]:
    if not value:
        return value
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]


async def store_credentials(store: CredentialStore, credentials: CredentialsIn) -> None:
    await store.set(
        CREDENTIALS_KEY,
        {
            "apiKey": credentials.api_key,
            "apiSecret": credentials.api_secret,
            "reportsUrl": credentials.reports_url.strip(),
        },
    )
    logger.info(f"Stored credentials for {credentials.reports_url}")


async def check_credentials(store: CredentialStore) -> CredentialsStatus:
    credentials = await store.get_all(CREDENTIALS_KEY)
    return CredentialsStatus(
        has_credentials=len(credentials) > 0,
        reports_url=credentials.get("reportsUrl"),
        api_key=mask_secret(credentials.get("apiKey")),
    )


async def delete_credentials(store: CredentialStore) -> None:
    await store.delete(CREDENTIALS_KEY)
    logger.info("Deleted stored credentials")
