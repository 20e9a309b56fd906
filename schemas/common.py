"""
schemas/common.py

- 프로젝트 전반에서 재사용할 공용 스키마 모음
- Pydantic v2 기준
- 포함 내용:
  1) 에러 응답 표준: ErrorDetail, ErrorResponse
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 에러 응답 표준
# =========================================================

class ErrorDetail(BaseModel):
    """에러 코드/메시지를 담는 최소 단위"""
    code: str = Field(..., description="에러 식별 코드 (예: NOT_FOUND, PERMISSION_DENIED)")
    message: str = Field(..., description="사람이 읽을 수 있는 에러 메시지")

class ErrorResponse(BaseModel):
    """
    전역 에러 핸들러에서 내려주는 표준 에러 응답
    - middlewares/error_handler.py에서 이 스키마로 리턴
    - success 는 성공 응답({"success": True, ...})과 짝을 맞추기 위해 항상 False
    """
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="응답 생성 시각 (UTC)"
    )
    trace_id: Optional[str] = Field(
        default=None, description="요청 추적용 ID(X-Request-ID 등을 복사해 넣을 수 있음)"
    )

    model_config = ConfigDict(extra="ignore")
