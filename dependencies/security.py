import hmac
from typing import Annotated, Optional

from fastapi import Header, HTTPException

from config.settings import settings

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def _bearer_token(authorization: Optional[str]) -> str:
    """'Bearer <token>' → token (형식이 다르면 401)"""
    if not authorization:
        raise _unauthorized("Missing Authorization header")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Authorization header must be 'Bearer <token>'")
    return token.strip()


def require_internal_token(authorization: AuthHeader = None):
    """
    공지/배치/학생 라우터 공통 가드
    - 호출자는 프론트 서버(Next.js API 라우트) 하나뿐
    - 사용자 식별(user_id, role)은 프론트가 인증 서비스에서 확인한 뒤 쿼리/바디로 넘겨준다
    """
    if not settings.INTERNAL_API_TOKEN:
        # 토큰 미설정이면 모든 요청 거부
        raise HTTPException(status_code=500, detail="INTERNAL_API_TOKEN is not configured")

    token = _bearer_token(authorization)
    if not hmac.compare_digest(token, settings.INTERNAL_API_TOKEN):
        raise _unauthorized("Invalid token")

    return {"client": "front"}
