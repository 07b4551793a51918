"""FastAPI 앱 진입점"""
import os

from fastapi import FastAPI

from app.logging_config import configure_logging

configure_logging(os.getenv("LOG_LEVEL", "INFO"))
from fastapi.middleware.cors import CORSMiddleware

from app.api import auth, settings as settings_api
from app.config import get_settings
from app.core.error_handlers import register_error_handlers

settings = get_settings()

app = FastAPI(
    title="Site Settings Server",
    description="사이트 설정 key-value 저장소 - 공개 조회, 로그인 후 저장",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)

app.include_router(auth.router)
app.include_router(settings_api.router)


@app.get("/health")
def health():
    return {"status": "ok"}
