from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


# ==========================================================
# [공통 코드값]
# ==========================================================
class Role(str, Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class TargetType(str, Enum):
    ALL = "all"
    STUDENTS = "students"
    TEACHERS = "teachers"
    SEMESTER = "semester"
    COURSE = "course"
    BATCH = "batch"


# 대상 값이 필요 없는 광역 공지
BROAD_TARGETS = {TargetType.ALL.value, TargetType.STUDENTS.value, TargetType.TEACHERS.value}


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    시각을 UTC 로 맞춘다.
    - DB 드라이버가 tzinfo 를 버리고 벽시계 시각만 저장하므로 저장 전에 반드시 UTC 로 변환
    - tzinfo 없는 값은 UTC 로 간주
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ==========================================================
# [입력용 스키마]
#  - 필수값 검증은 서비스 계층(ValidationError)에서 처리 → 항목을 Optional로 둠
# ==========================================================
class NoticeCreate(BaseModel):
    title: Optional[str] = None                  # 제목
    message: Optional[str] = None                # 내용
    attachment_url: Optional[str] = None         # 첨부 경로
    target_type: Optional[str] = None            # 대상 구분
    target_value: Optional[str] = None           # 대상 값
    is_pinned: Optional[bool] = False            # 상단 고정
    expires_at: Optional[datetime] = None        # 만료 시각
    created_by: Optional[str] = None             # 작성자 ID

    # ✅ 만료 시각은 UTC 로 저장 (+09:00 등 오프셋 포함 입력 대응)
    @field_validator("expires_at")
    @classmethod
    def _expires_at_utc(cls, v):
        return as_utc(v)


class NoticeUpdate(BaseModel):
    # ✅ 보낸 항목만 수정 (model_dump(exclude_unset=True))
    title: Optional[str] = None
    message: Optional[str] = None
    attachment_url: Optional[str] = None
    target_type: Optional[str] = None
    target_value: Optional[str] = None
    is_pinned: Optional[bool] = None
    expires_at: Optional[datetime] = None
    user_id: Optional[str] = None                # 수정 요청자 ID (권한 확인용, 패치 대상 아님)

    @field_validator("expires_at")
    @classmethod
    def _expires_at_utc(cls, v):
        return as_utc(v)


class NoticeReadRequest(BaseModel):
    user_id: Optional[str] = None


# ==========================================================
# [출력용 스키마]
# ==========================================================
class UserSummary(BaseModel):
    id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Notice(BaseModel):
    id: int
    title: str
    message: str
    attachment_url: Optional[str] = None
    target_type: str
    target_value: Optional[str] = None
    is_pinned: bool
    created_by: str
    created_at: datetime
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VisibleNotice(Notice):
    created_by_user: Optional[UserSummary] = None
    is_read: bool = False


class ReadReceipt(BaseModel):
    user_id: str
    read_at: datetime
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class NoticeDetail(Notice):
    created_by_user: Optional[UserSummary] = None
    reads: List[ReadReceipt] = []
    is_read: Optional[bool] = None
    read_at: Optional[datetime] = None
