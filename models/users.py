from sqlalchemy import Column, String
from database.db import Base

class User(Base):
    __tablename__ = "users"  # 사용자 프로필 테이블 (인증 서비스가 관리, 여기서는 읽기 전용)

    id = Column(String(36), primary_key=True, index=True)           # 사용자 고유 ID (인증 서비스 UUID)
    full_name = Column(String(100))                                 # 이름
    email = Column(String(255), unique=True)                        # 이메일
    role = Column(String(20), nullable=False)                       # 역할 (admin / teacher / student)
