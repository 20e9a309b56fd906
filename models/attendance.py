from sqlalchemy import Column, Integer, String, Date, ForeignKey
from database.db import Base

class Attendance(Base):
    __tablename__ = "attendance"  # 출결 기록 테이블

    id = Column(Integer, primary_key=True, index=True)                        # 출결 고유 ID (Primary Key)
    student_id = Column(String(36), ForeignKey("students.id"), nullable=False, index=True)  # 학생 ID
    subject_id = Column(Integer)                                              # 과목 ID (선택)
    date = Column(Date, nullable=False)                                       # 날짜
    status = Column(String(20), nullable=False)                               # 출결 상태 (present / absent / late)
