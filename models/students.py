from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.batches import Batch   # ✅ Batch 직접 import (relationship 등록용)

class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(String(36), ForeignKey("users.id"), primary_key=True, index=True)  # 학생 ID (= users.id)
    full_name = Column(String(100), nullable=False)                                # 학생 이름 (학번 정렬 기준)
    roll = Column(String(10))                                                      # 학번 ("1", "2", ...) - 배치 배정 전에는 NULL
    batch_id = Column(Integer, ForeignKey("batches.id"), index=True)               # 소속 배치 ID (미배정이면 NULL)

    # ✅ 소속 배치 (N:1) → 학기/과정은 배치를 통해 조회
    batch = relationship(Batch)
