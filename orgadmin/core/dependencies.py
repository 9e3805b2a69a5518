# orgadmin/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 현재 요청의 인증 컨텍스트 (Bearer 토큰 → 토큰 레코드 + 사용자).
- 현재 인증된 사용자, 감사 컬럼에 기록할 행위자(actor) ID.
- 요청 본문 읽기 (JSON 또는 multipart/form-data).

라우터는 데이터베이스 세션을 `orgadmin.core.database.get_session`으로 직접 주입받습니다.
"""

from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from starlette.datastructures import UploadFile
from sqlmodel.ext.asyncio.session import AsyncSession

from orgadmin.core.database import get_session
from orgadmin.core.exceptions import ValidationError
from orgadmin.core.security import bearer_scheme
from orgadmin.domains.usr import models as usr_models
from orgadmin.domains.usr import services as usr_services


# --- 인증 관련 의존성 ---
async def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_session),
) -> usr_services.AuthContext:
    """
    Authorization: Bearer <token> 헤더를 해석합니다.
    헤더가 없거나 토큰이 유효하지 않으면 401 (UnauthorizedError).
    """
    token = credentials.credentials if credentials else None
    return await usr_services.resolve_token(db, token=token)


async def get_current_user(
    context: usr_services.AuthContext = Depends(get_auth_context),
) -> usr_models.User:
    """현재 인증된 (활성) 사용자"""
    return context.user


async def get_actor(context: usr_services.AuthContext = Depends(get_auth_context)) -> str:
    """생성자/수정자 감사 컬럼에 기록할 행위자 ID"""
    return context.actor


# --- 요청 본문 ---
async def read_payload(request: Request) -> Dict[str, Any]:
    """
    요청 본문을 필드 딕셔너리로 읽습니다.

    - multipart/form-data, application/x-www-form-urlencoded: 폼 필드와 업로드 파일.
      'roles' (또는 'roles[]')는 여러 값을 목록으로 모읍니다.
    - 그 외: JSON 객체. 본문이 비어있으면 빈 딕셔너리.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        payload: Dict[str, Any] = {}
        for key in form.keys():
            if key in ("roles", "roles[]"):
                payload["roles"] = [v for v in form.getlist(key) if v != ""]
            else:
                value = form.get(key)
                # 파일을 선택하지 않은 파일 필드는 전달되지 않은 값으로 봅니다.
                if isinstance(value, UploadFile) and not value.filename:
                    value = None
                payload[key] = value
        return payload

    body = await request.body()
    if not body:
        return {}
    try:
        data = await request.json()
    except ValueError:
        raise ValidationError({"__root__": ["The request body must be valid JSON."]}, message="Validation error")
    if not isinstance(data, dict):
        raise ValidationError({"__root__": ["The request body must be a JSON object."]}, message="Validation error")
    return data
