"""로컬 디스크 파일 스토리지: UPLOAD_DIR/<folder>/<folder>-<timestamp>-<id>.<ext>"""
import os
import time
import uuid
from pathlib import Path
from typing import Optional

import anyio
import anyio.to_thread
from loguru import logger

from domain.entities.order import StoredFileEntity
from domain.exceptions import ServerError
from application.ports.blob_storage import BlobStorage

URL_PREFIX = "/uploads"


class LocalBlobStorage(BlobStorage):
    def __init__(self, root: str):
        self.root = Path(root).resolve()

    def resolve(self, path: str) -> Optional[Path]:
        """'/uploads/...' 경로를 실제 파일 경로로. 루트 밖을 가리키면 None"""
        if not path.startswith(URL_PREFIX + "/"):
            return None
        full = (self.root / path[len(URL_PREFIX) + 1:]).resolve()
        if self.root not in full.parents:
            return None
        return full

    async def store(self, content: bytes, original_name: str, mimetype: str,
                    folder: str) -> StoredFileEntity:
        ext = Path(original_name).suffix.lower()
        filename = f"{folder}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}{ext}"
        target_dir = self.root / folder
        try:
            await anyio.to_thread.run_sync(lambda: target_dir.mkdir(parents=True, exist_ok=True))
            await anyio.Path(target_dir / filename).write_bytes(content)
        except OSError as e:
            logger.error(f"파일 저장 실패: {original_name} - {e}")
            raise ServerError(f"파일 저장에 실패했습니다: {original_name}")

        return StoredFileEntity(
            id=uuid.uuid4().hex,
            filename=filename,
            original_name=original_name,
            mimetype=mimetype or "application/octet-stream",
            size=len(content),
            path=f"{URL_PREFIX}/{folder}/{filename}",
        )

    async def delete(self, path: str) -> bool:
        full = self.resolve(path)
        if full is None:
            logger.warning(f"스토리지 밖 경로 삭제 요청 무시: {path}")
            return False
        try:
            await anyio.to_thread.run_sync(lambda: os.remove(full) if full.exists() else None)
            return True
        except OSError as e:
            logger.warning(f"파일 삭제 실패: {path} - {e}")
            return False
