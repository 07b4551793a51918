"""로깅 설정 - stdlib logging + structlog

모든 모듈은 `log = structlog.get_logger(__name__)` 만 사용한다.
"""
import logging
import os
import sys

import structlog


def configure_logging(level: str = "INFO") -> None:
    """루트 로거와 structlog 설정. LOG_JSON=1 이면 JSON 한 줄 출력"""
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    for lib in ("httpx", "httpcore", "sqlalchemy.engine"):
        logging.getLogger(lib).setLevel(logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes"):
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
