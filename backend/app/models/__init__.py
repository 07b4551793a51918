"""DB 모델"""
from app.models.user import User, DbSession
from app.models.site_setting import SiteSetting

__all__ = [
    "User",
    "DbSession",
    "SiteSetting",
]
