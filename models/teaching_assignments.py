from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base
from models.batches import Batch

class TeachingAssignment(Base):
    __tablename__ = "teaching_assignments"  # 교사 ↔ 배치(과목) 배정 테이블

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)  # 배정 고유 ID
    teacher_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)  # 교사 ID
    batch_id = Column(Integer, ForeignKey("batches.id"), nullable=False)    # 담당 배치 ID
    subject_id = Column(Integer)                                            # 담당 과목 ID (선택)

    batch = relationship(Batch)
