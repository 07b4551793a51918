"""사이트 설정 스키마"""
from datetime import datetime

from pydantic import BaseModel


class SiteSettingResponse(BaseModel):
    key: str
    value: str | None = None
    group: str | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class SaveSettingsResponse(BaseModel):
    message: str = "Settings saved"
    results: list[SiteSettingResponse]
