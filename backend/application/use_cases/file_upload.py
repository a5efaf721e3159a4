"""업로드 파일 저장 공통 로직 (주문 첨부 / 납품 콘텐츠)"""
from typing import List

from loguru import logger

from domain.entities.order import StoredFileEntity
from domain.exceptions import ValidationError
from application.ports.blob_storage import BlobStorage, IncomingFile


def check_file_count(count: int, max_files: int) -> None:
    if count > max_files:
        raise ValidationError(f"파일은 한 번에 최대 {max_files}개까지 업로드할 수 있습니다.")


def check_file_size(filename: str, size: int, max_file_size: int) -> None:
    if size > max_file_size:
        raise ValidationError(f"파일 크기는 {max_file_size // 1024 // 1024}MB 이하여야 합니다: {filename}")


def validate_files(files: List[IncomingFile], max_file_size: int, max_files: int) -> None:
    check_file_count(len(files), max_files)
    for f in files:
        if f.size == 0:
            raise ValidationError(f"빈 파일은 업로드할 수 없습니다: {f.filename}")
        check_file_size(f.filename, f.size, max_file_size)


async def store_files(storage: BlobStorage, files: List[IncomingFile], folder: str) -> List[StoredFileEntity]:
    """모두 저장하거나, 중간 실패 시 이미 저장한 파일을 지우고 예외 전파"""
    stored: List[StoredFileEntity] = []
    try:
        for f in files:
            stored.append(await storage.store(f.content, f.filename, f.content_type, folder))
    except Exception:
        await discard_files(storage, stored)
        raise
    return stored


async def discard_files(storage: BlobStorage, files: List[StoredFileEntity]) -> None:
    """DB 반영 실패 시 보상 삭제 (best-effort)"""
    for f in files:
        if not await storage.delete(f.path):
            logger.warning(f"업로드 파일 정리 실패: {f.path}")
