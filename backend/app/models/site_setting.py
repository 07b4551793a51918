"""사이트 설정 모델 (key-value, 선택적 group)"""
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class SiteSetting(Base):
    """사이트 설정 key-value"""

    __tablename__ = "site_settings"
    __table_args__ = (CheckConstraint("length(key) > 0", name="ck_site_settings_key_not_empty"),)

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)
    group: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<SiteSetting {self.key}>"
