"""Pydantic schemas for storing and inspecting the reporting service credentials."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CredentialsIn(BaseModel):
    api_key: Optional[str] = Field(None, alias="apiKey")
    api_secret: Optional[str] = Field(None, alias="apiSecret")
    reports_url: Optional[str] = Field(None, alias="reportsUrl")

    model_config = ConfigDict(populate_by_name=True)

    def is_complete(self) -> bool:
        return bool(self.api_key and self.api_secret and self.reports_url and self.reports_url.strip())


class CredentialsStatus(BaseModel):
    has_credentials: bool
    reports_url: Optional[str] = Field(None, alias="reportsUrl")
    api_key: Optional[str] = Field(None, alias="apiKey", description="Masked API key")

    model_config = ConfigDict(populate_by_name=True)
