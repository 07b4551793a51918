"""설정 변경 후 캐시 무효화 (best-effort)

저장 트랜잭션이 commit 된 뒤 호출된다. 리스너 실패는 로그만 남기고
삼킨다 - 무효화 실패가 저장 실패로 바뀌면 안 된다.
"""
from collections.abc import Callable
from functools import lru_cache

import httpx
import structlog

from app.config import get_settings

log = structlog.get_logger(__name__)

ROOT_SCOPE = "/"
LAYOUT_KIND = "layout"

Listener = Callable[[str, str], None]


class CacheInvalidator:
    """등록된 리스너들에게 scope 아래 파생 캐시가 stale 하다고 알린다"""

    def __init__(self, listeners: list[Listener] | None = None):
        self._listeners: list[Listener] = list(listeners or [])

    def register(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def invalidate(self, scope: str = ROOT_SCOPE, kind: str = LAYOUT_KIND) -> None:
        for listener in self._listeners:
            try:
                listener(scope, kind)
            except Exception as exc:
                log.warning(
                    "cache_invalidation_failed",
                    scope=scope,
                    kind=kind,
                    listener=getattr(listener, "__name__", type(listener).__name__),
                    error=str(exc),
                )
        log.info("cache_invalidated", scope=scope, kind=kind, listeners=len(self._listeners))


class RevalidationWebhook:
    """프런트엔드 재검증 엔드포인트 호출 - {"path", "type"} POST"""

    def __init__(
        self,
        url: str,
        token: str = "",
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.url = url
        self.token = token
        self.timeout = timeout
        self._transport = transport

    def __call__(self, scope: str, kind: str) -> None:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            resp = client.post(self.url, json={"path": scope, "type": kind}, headers=headers)
            resp.raise_for_status()


@lru_cache
def get_cache_invalidator() -> CacheInvalidator:
    """의존성: 설정 기반 무효화기 (웹훅 URL 없으면 리스너 없음)"""
    settings = get_settings()
    invalidator = CacheInvalidator()
    if settings.revalidate_url:
        invalidator.register(
            RevalidationWebhook(
                settings.revalidate_url,
                token=settings.revalidate_token,
                timeout=settings.revalidate_timeout_seconds,
            )
        )
    return invalidator
