"""사이트 설정 저장소 - 조회, 그룹 필터, 일괄 upsert (단일 트랜잭션)"""
import json
import math
from collections.abc import Iterable
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError, describe
from app.models import SiteSetting

log = structlog.get_logger(__name__)


def coerce_value(value: Any) -> str:
    """저장용 문자열 변환.

    None -> "", bool -> "true"/"false", 정수/실수 -> 10진 문자열
    (1.0 -> "1"), str -> 그대로, list/dict -> JSON 문자열.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def list_all(db: Session) -> list[SiteSetting]:
    try:
        return list(db.execute(select(SiteSetting)).scalars().all())
    except SQLAlchemyError as exc:
        raise StorageError(describe(exc)) from exc


def list_by_group(db: Session, group: str) -> list[SiteSetting]:
    """group이 일치하는 설정만. 없으면 빈 리스트"""
    stmt = select(SiteSetting).where(SiteSetting.group == group)
    try:
        return list(db.execute(stmt).scalars().all())
    except SQLAlchemyError as exc:
        raise StorageError(describe(exc)) from exc


def upsert_batch(db: Session, entries: Iterable[tuple[str, Any]]) -> list[SiteSetting]:
    """(key, value) 쌍을 순서대로 upsert 후 한 번에 commit.

    하나라도 실패하면 전체 rollback 후 StorageError. 반환 순서 = 입력 순서.
    """
    rows: list[SiteSetting] = []
    try:
        for key, value in entries:
            text = coerce_value(value)
            row = db.get(SiteSetting, key)
            if row is None:
                row = SiteSetting(key=key, value=text)
                db.add(row)
            else:
                row.value = text
            db.flush()
            rows.append(row)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        log.warning("settings_batch_rolled_back", applied=len(rows), error=describe(exc))
        raise StorageError(describe(exc)) from exc
    return rows
