"""사이트 설정 API - 조회는 공개, 저장은 로그인 필요"""
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.core.auth import require_user
from app.core.errors import BadRequest, ReadFailure, StorageError, WriteFailure, describe
from app.database import get_db
from app.models import SiteSetting, User
from app.schemas.site_setting import SaveSettingsResponse, SiteSettingResponse
from app.services import site_settings as store
from app.services.cache import LAYOUT_KIND, ROOT_SCOPE, CacheInvalidator, get_cache_invalidator

router = APIRouter(prefix="/api/settings", tags=["settings"])
log = structlog.get_logger(__name__)

# 저장값과 무관하게 항상 덮어쓰는 키
FORCED_SETTINGS: dict[str, Any] = {"enableSearch": True}


def merge_settings(rows: list[SiteSetting], defaults: dict[str, str]) -> dict[str, Any]:
    """기본값 < 저장값 < 강제값 순으로 덮어쓴 평면 key-value"""
    stored = {row.key: row.value or "" for row in rows}
    return {**defaults, **stored, **FORCED_SETTINGS}


async def read_json_object(request: Request) -> dict[str, Any]:
    """의존성: 요청 본문을 JSON 객체로 파싱. 실패 시 400"""
    try:
        payload = await request.json()
    except ValueError as exc:
        raise BadRequest(describe(exc)) from exc
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be a JSON object")
    return payload


@router.get("")
def get_settings_api(
    response: Response,
    group: str | None = Query(None),
    db: Session = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """설정 조회 (GET /api/settings?group= - get_settings와 이름 충돌 방지를 위해 get_settings_api 사용)"""
    response.headers["Cache-Control"] = "no-store"
    try:
        rows = store.list_by_group(db, group) if group else store.list_all(db)
    except StorageError as exc:
        log.error("settings_read_failed", group=group, error=exc.details)
        raise ReadFailure(exc.details) from exc
    return merge_settings(rows, config.settings_defaults)


@router.post("", response_model=SaveSettingsResponse)
def save_settings(
    current_user: User = Depends(require_user),
    payload: dict[str, Any] = Depends(read_json_object),
    db: Session = Depends(get_db),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
):
    """설정 일괄 저장 - 전부 반영되거나 전부 취소. 성공 후 전체 캐시 무효화"""
    try:
        rows = store.upsert_batch(db, payload.items())
    except StorageError as exc:
        log.error("settings_write_failed", keys=list(payload), error=exc.details)
        raise WriteFailure(exc.details) from exc
    results = [SiteSettingResponse.model_validate(row) for row in rows]
    log.info("settings_saved", user=current_user.username, count=len(results))
    invalidator.invalidate(ROOT_SCOPE, LAYOUT_KIND)
    return SaveSettingsResponse(results=results)
