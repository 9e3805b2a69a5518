# orgadmin/utils/files.py

"""
업로드 파일을 UPLOAD_DIR 아래에 저장하고 삭제하는 유틸리티입니다.

DB에는 UPLOAD_DIR 기준 상대 경로(예: "profile_images/me.png")만 저장하며,
웹에서는 main.py가 마운트한 /storage 경로로 접근합니다.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from orgadmin.core.config import settings
from orgadmin.core.exceptions import InternalError

logger = logging.getLogger(__name__)

PROFILE_IMAGE_DIR = "profile_images"
CHUNK_SIZE = 1024 * 1024


def _upload_root() -> Path:
    # settings 값은 테스트에서 바뀔 수 있으므로 호출 시점에 읽습니다.
    return Path(settings.UPLOAD_DIR)


def storage_path(relative_path: str) -> Path:
    """상대 경로를 UPLOAD_DIR 아래의 절대 경로로 변환합니다."""
    return _upload_root() / relative_path


def upload_relative_path(sub_dir: str, upload_file: UploadFile) -> str:
    """
    업로드 파일이 저장될 UPLOAD_DIR 기준 상대 경로 (예: "profile_images/me.png")
    원본 파일명의 디렉토리 부분은 제거합니다 (경로 조작 방지).
    """
    filename = os.path.basename((upload_file.filename or "").replace("\\", "/"))
    if not filename:
        raise InternalError("Uploaded file has no name.")
    return f"{sub_dir}/{filename}"


def profile_image_path(upload_file: UploadFile) -> str:
    return upload_relative_path(PROFILE_IMAGE_DIR, upload_file)


async def save_upload_file(sub_dir: str, upload_file: UploadFile) -> str:
    """
    업로드된 파일을 UPLOAD_DIR/<sub_dir>/<원본 파일명>으로 저장합니다.
    같은 이름의 파일이 있으면 덮어씁니다.

    Returns:
        str: UPLOAD_DIR 기준 상대 경로 (예: "profile_images/me.png")
    """
    relative_path = upload_relative_path(sub_dir, upload_file)
    target = storage_path(relative_path)
    target.parent.mkdir(parents=True, exist_ok=True)

    size = 0
    try:
        await upload_file.seek(0)
        async with aiofiles.open(target, "wb") as f:
            while True:
                chunk = await upload_file.read(CHUNK_SIZE)
                if not chunk:
                    break
                await f.write(chunk)
                size += len(chunk)
    except OSError as e:
        logger.error("파일 저장 실패: %s (%s)", target, e)
        raise InternalError("Failed to store the uploaded file.")

    logger.info("파일 저장: %s (%d bytes)", relative_path, size)
    return relative_path


async def save_profile_image(upload_file: UploadFile) -> str:
    return await save_upload_file(PROFILE_IMAGE_DIR, upload_file)


async def remove_stored_file(relative_path: Optional[str]) -> bool:
    """
    저장된 파일을 삭제합니다. 파일이 없으면 아무 것도 하지 않습니다.
    삭제 실패는 로그만 남기고 요청을 실패시키지 않습니다.
    """
    if not relative_path:
        return False
    path = storage_path(relative_path)
    if not await aiofiles.os.path.exists(path):
        return False
    try:
        await aiofiles.os.remove(path)
    except OSError as e:
        logger.warning("이전 파일 삭제 실패: %s (%s)", path, e)
        return False
    logger.info("파일 삭제: %s", relative_path)
    return True
