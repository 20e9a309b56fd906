from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.users import User

def _utcnow():
    return datetime.now(timezone.utc)

class Notice(Base):
    __tablename__ = "notices"  # 공지사항 테이블

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)   # 공지 고유 ID
    title = Column(String(200), nullable=False)                              # 공지 제목
    message = Column(Text, nullable=False)                                   # 공지 내용
    attachment_url = Column(String(500))                                     # 첨부 파일 경로 (선택)
    target_type = Column(String(20), nullable=False, index=True)             # 대상 구분 (all/students/teachers/semester/course/batch)
    target_value = Column(String(50))                                        # 대상 값 (학기 번호, 과정 ID, 배치 ID)
    is_pinned = Column(Boolean, default=False, nullable=False)               # 상단 고정 여부
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)  # 작성자 ID
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)  # 작성 시각 (UTC)
    expires_at = Column(DateTime(timezone=True))                             # 만료 시각 (NULL이면 만료 없음)

    # ✅ 작성자 (N:1)
    creator = relationship(User)
