# orgadmin/core/security.py

"""
애플리케이션의 보안 관련 유틸리티 함수를 정의하는 모듈입니다.

- 비밀번호 해싱 및 검증 (passlib / bcrypt).
- Bearer 토큰(JWT) 생성 및 디코딩. 토큰은 고유 식별자(jti)를 가지며,
  jti가 personal_access_tokens 테이블에 남아있는 동안에만 유효합니다 (로그아웃 시 폐기).
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi.security import HTTPBearer

from orgadmin.core.config import settings
from orgadmin.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# --- 비밀번호 해싱 설정 ---
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    일반 텍스트 비밀번호와 해싱된 비밀번호를 비교하여 일치하는지 확인합니다.
    해시가 비어있거나 형식이 잘못된 경우에도 예외 대신 False를 반환합니다.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("인식할 수 없는 비밀번호 해시 형식입니다.")
        return False


def get_password_hash(password: str) -> str:
    """주어진 비밀번호를 해싱합니다."""
    return pwd_context.hash(password)


# --- Bearer 스키마 ---
# auto_error=False: 헤더 누락 시 FastAPI 기본 403 대신 공통 봉투의 401을 반환하기 위함
bearer_scheme = HTTPBearer(auto_error=False)


def new_token_id() -> str:
    return uuid.uuid4().hex


def token_expiry(now: Optional[datetime] = None) -> Optional[datetime]:
    """설정된 만료 시간을 적용한 만료 시각. 만료를 사용하지 않으면 None."""
    minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    if not minutes:
        return None
    return (now or datetime.now(timezone.utc)) + timedelta(minutes=minutes)


def create_access_token(*, subject: Any, jti: str, expires_at: Optional[datetime] = None) -> str:
    """
    Access Token을 생성합니다.
    sub에는 사용자 ID, jti에는 저장된 토큰 레코드의 식별자를 담습니다.
    """
    to_encode: Dict[str, Any] = {
        "sub": str(subject),
        "jti": jti,
        "iat": datetime.now(timezone.utc),
    }
    if expires_at is not None:
        to_encode["exp"] = expires_at
    return jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    토큰 서명과 만료를 검증하고 페이로드를 반환합니다.
    검증 실패 시 UnauthorizedError를 발생시킵니다.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("토큰 검증 실패: %s", e)
        raise UnauthorizedError()
    if not payload.get("sub") or not payload.get("jti"):
        raise UnauthorizedError()
    return payload
