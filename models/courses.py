from sqlalchemy import Column, Integer, String
from database.db import Base

class Course(Base):
    __tablename__ = "courses"  # 학과(과정) 테이블

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)  # 과정 고유 ID
    code = Column(String(20), nullable=False, unique=True)                  # 과정 코드 (예: BCA)
    name = Column(String(100), nullable=False)                              # 과정 이름
