"""업로드 파일 다운로드 라우터: 주문 소유 클라이언트 또는 관리자만"""
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from loguru import logger

from config import settings
from domain.entities.user import Identity
from domain.exceptions import StoredFileNotFoundError
from application.use_cases.order_actions import load_order
from infrastructure.persistence.repositories.order_repository import SqlAlchemyOrderRepository
from infrastructure.storage.local_storage import LocalBlobStorage, URL_PREFIX
from api.dependencies import get_current_identity, get_order_repo

router = APIRouter(prefix="/api/files", tags=["파일"])


def get_local_storage() -> LocalBlobStorage:
    return LocalBlobStorage(settings.UPLOAD_DIR)


@router.get("/{file_path:path}")
async def download_file(file_path: str,
                        identity: Identity = Depends(get_current_identity),
                        order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo),
                        storage: LocalBlobStorage = Depends(get_local_storage)):
    stored_path = f"{URL_PREFIX}/{file_path}"
    found = await order_repo.find_file(stored_path)
    if found is None:
        raise StoredFileNotFoundError(file_path)
    stored, order_id = found

    order = await load_order(order_repo, order_id)
    order.ensure_visible_to(identity.user_id, identity.role)

    full_path = storage.resolve(stored_path)
    if full_path is None or not full_path.is_file():
        logger.warning(f"DB에는 있으나 디스크에 없는 파일: {stored_path}")
        raise StoredFileNotFoundError(file_path)
    return FileResponse(full_path, media_type=stored.mimetype, filename=stored.original_name)
