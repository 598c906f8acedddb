"""
schemas/common.py

- 프로젝트 전반에서 재사용할 공용 스키마 모음
- Pydantic v2 기준
- 포함 내용:
  1) 에러 응답 표준: ErrorDetail, ErrorResponse
  2) 성공 응답 헬퍼: ok()
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 1) 에러 응답 표준
# =========================================================

class ErrorDetail(BaseModel):
    """에러 코드/메시지를 담는 최소 단위"""
    code: str = Field(..., description="에러 식별 코드 (예: NOT_FOUND, VALIDATION_ERROR)")
    message: str = Field(..., description="사람이 읽을 수 있는 에러 메시지")
    fields: Optional[List[dict]] = Field(default=None, description="요청 검증 실패 시 필드별 상세")


class ErrorResponse(BaseModel):
    """
    전역 에러 핸들러에서 내려주는 표준 에러 응답
    - middlewares/error_handler.py에서 이 스키마로 리턴
    """
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="응답 생성 시각 (UTC)"
    )
    latency_ms: Optional[int] = Field(
        default=None, ge=0, description="요청 처리에 걸린 시간(ms). 타이밍 미들웨어와 연동 시 사용"
    )

    model_config = ConfigDict(extra="ignore")


# HTTP 상태 코드 → 에러 코드
ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
}


def error_code_for(status_code: int) -> str:
    return ERROR_CODES.get(status_code, "HTTP_ERROR")


# =========================================================
# 2) 성공 응답
# =========================================================

def ok(data: Any, message: Optional[str] = None) -> dict:
    """라우터 공통 성공 응답 {"success": True, "data": ..., "message": ...}"""
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body
