from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base
from models.users import User

class NoticeRead(Base):
    __tablename__ = "notice_reads"  # 공지 읽음 기록 테이블
    __table_args__ = (
        # ✅ (공지, 사용자) 당 한 줄 → upsert 충돌 키
        UniqueConstraint("notice_id", "user_id", name="uq_notice_reads_notice_user"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)                 # 읽음 기록 ID
    notice_id = Column(Integer, ForeignKey("notices.id"), nullable=False, index=True)      # 공지 ID
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)       # 읽은 사용자 ID
    read_at = Column(DateTime(timezone=True), nullable=False,
                     default=lambda: datetime.now(timezone.utc))                           # 마지막으로 읽은 시각

    user = relationship(User)
