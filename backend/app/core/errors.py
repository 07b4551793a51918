"""API 오류 타입 - 모두 {"error", "details"} JSON으로 변환된다"""


class AppError(Exception):
    """핸들러 경계에서 JSON 오류 응답으로 바뀌는 예외"""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, details: str | None = None, *, error: str | None = None):
        super().__init__(details or error or self.error)
        self.details = details
        if error is not None:
            self.error = error

    def to_content(self) -> dict[str, str]:
        content = {"error": self.error}
        if self.details is not None:
            content["details"] = self.details
        return content


class Unauthorized(AppError):
    """세션 없음. clear_cookie=True 면 응답에서 세션 쿠키도 삭제"""

    status_code = 401
    error = "Please login"

    def __init__(self, details: str | None = None, *, error: str | None = None, clear_cookie: bool = False):
        super().__init__(details, error=error)
        self.clear_cookie = clear_cookie


class BadRequest(AppError):
    status_code = 400
    error = "Invalid request body"


class StorageError(AppError):
    """저장소 접근 실패 (연결, 제약조건 위반, 트랜잭션 중단)"""

    error = "Storage error"


class ReadFailure(AppError):
    error = "Failed to get settings"


class WriteFailure(AppError):
    error = "Database operation failed"


def describe(exc: BaseException) -> str:
    """클라이언트에 돌려줄 짧은 오류 설명 (첫 줄만)"""
    message = str(exc).strip()
    if not message:
        return "Unknown error"
    return message.splitlines()[0]
