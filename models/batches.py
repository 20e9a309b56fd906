from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.courses import Course   # ✅ Course 직접 import (relationship 등록용)

class Batch(Base):
    __tablename__ = "batches"  # 반(배치) 테이블

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)  # 배치 고유 ID
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False)   # 소속 과정 ID (FK)
    academic_unit = Column(Integer, nullable=False)                         # 학기 번호 (예: 5 → 5학기)
    section = Column(String(10))                                            # 분반 (예: A, B)

    # ✅ 배치가 속한 과정 (N:1)
    course = relationship(Course)
