"""주문 라우터: 생성 / 조회 / 상태 전이 / 납품 업로드"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from config import settings
from domain.entities.user import Identity
from domain.enums import OrderPriority, UserRole
from domain.exceptions import ValidationError
from application.ports.blob_storage import BlobStorage, IncomingFile
from application.use_cases.create_order import CreateOrderInput, CreateOrderUseCase
from application.use_cases.file_upload import check_file_count, check_file_size
from application.use_cases.order_actions import OrderActionInput, OrderActionUseCase, load_order
from application.use_cases.upload_deliverable import UploadDeliverableInput, UploadDeliverableUseCase
from infrastructure.persistence.repositories.order_repository import SqlAlchemyOrderRepository
from api.schemas.orders import (
    OrderResponse, OrderListResponse, OrderFeedbackRequest, AdminContentResponse,
    OrderActionsResponse, order_info, admin_content_info,
)
from api.dependencies import get_current_identity, get_order_repo, get_blob_storage

router = APIRouter(prefix="/api/orders", tags=["주문"])


async def _read_uploads(files: Optional[List[UploadFile]], max_file_size: int,
                        max_files: int) -> List[IncomingFile]:
    """개수와 크기를 먼저 확인한 뒤 내용을 읽는다"""
    # 파일 필드가 비어 있으면 이름 없는 빈 파트가 들어온다
    parts = [f for f in files or [] if f.filename]
    check_file_count(len(parts), max_files)
    for f in parts:
        if f.size is not None:
            check_file_size(f.filename, f.size, max_file_size)

    incoming = []
    for f in parts:
        incoming.append(IncomingFile(filename=f.filename,
                                     content_type=f.content_type or "application/octet-stream",
                                     content=await f.read()))
    return incoming


def _parse_priority(value: Optional[str]) -> OrderPriority:
    try:
        return OrderPriority((value or OrderPriority.NORMAL.value).upper())
    except ValueError:
        raise ValidationError(f"알 수 없는 우선순위입니다: {value}")


def _parse_due_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"마감일 형식이 올바르지 않습니다 (YYYY-MM-DD): {value}")


def _order_response(order, identity: Identity, message: str = None) -> OrderResponse:
    return OrderResponse(success=True, message=message,
                         order=order_info(order, order.available_actions(identity.user_id, identity.role)))


@router.post("", response_model=OrderResponse)
async def create_order(title: str = Form(""),
                       description: Optional[str] = Form(None),
                       priority: Optional[str] = Form(None),
                       due_date: Optional[str] = Form(None),
                       files: Optional[List[UploadFile]] = File(None),
                       identity: Identity = Depends(get_current_identity),
                       order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo),
                       storage: BlobStorage = Depends(get_blob_storage)):
    """클라이언트 주문 생성 (multipart: 제목/설명/우선순위/마감일 + 첨부 파일)"""
    use_case = CreateOrderUseCase(order_repo, storage, settings.MAX_FILE_SIZE, settings.MAX_FILES_PER_UPLOAD)
    order = await use_case.execute(CreateOrderInput(
        client=identity, title=title, description=description,
        priority=_parse_priority(priority), due_date=_parse_due_date(due_date),
        files=await _read_uploads(files, settings.MAX_FILE_SIZE, settings.MAX_FILES_PER_UPLOAD)))
    return _order_response(order, identity, "주문이 등록되었습니다.")


@router.get("", response_model=OrderListResponse)
async def list_orders(identity: Identity = Depends(get_current_identity),
                      order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo)):
    """관리자는 전체, 클라이언트는 본인 주문만"""
    if identity.role == UserRole.ADMIN:
        orders = await order_repo.list_all()
    else:
        orders = await order_repo.list_by_client(identity.user_id)
    items = [order_info(o, o.available_actions(identity.user_id, identity.role)) for o in orders]
    return OrderListResponse(success=True, orders=items, total=len(items))


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str,
                    identity: Identity = Depends(get_current_identity),
                    order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo)):
    order = await load_order(order_repo, order_id)
    order.ensure_visible_to(identity.user_id, identity.role)
    return _order_response(order, identity)


@router.get("/{order_id}/actions", response_model=OrderActionsResponse)
async def get_available_actions(order_id: str,
                                identity: Identity = Depends(get_current_identity),
                                order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo)):
    """현재 사용자가 이 주문에 대해 수행할 수 있는 동작 (UI 버튼 표시용)"""
    order = await load_order(order_repo, order_id)
    actions = await OrderActionUseCase(order_repo).available_actions(order_id, identity)
    return OrderActionsResponse(order_id=order.id, status=order.status.value,
                                actions=[a.value for a in actions])


@router.post("/{order_id}/start", response_model=OrderResponse)
async def start_work(order_id: str,
                     identity: Identity = Depends(get_current_identity),
                     order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo)):
    order = await OrderActionUseCase(order_repo).start_work(OrderActionInput(order_id=order_id, actor=identity))
    return _order_response(order, identity, "작업을 시작했습니다.")


@router.post("/{order_id}/content", response_model=AdminContentResponse)
async def upload_content(order_id: str,
                         description: Optional[str] = Form(None),
                         files: Optional[List[UploadFile]] = File(None),
                         identity: Identity = Depends(get_current_identity),
                         order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo),
                         storage: BlobStorage = Depends(get_blob_storage)):
    """관리자 납품 콘텐츠 업로드. 주문 상태는 바뀌지 않는다"""
    use_case = UploadDeliverableUseCase(order_repo, storage, settings.MAX_FILE_SIZE,
                                        settings.MAX_FILES_PER_UPLOAD)
    content = await use_case.execute(UploadDeliverableInput(
        order_id=order_id, actor=identity, description=description,
        files=await _read_uploads(files, settings.MAX_FILE_SIZE, settings.MAX_FILES_PER_UPLOAD)))
    order = await load_order(order_repo, order_id)
    return AdminContentResponse(success=True, message="콘텐츠가 업로드되었습니다.",
                                order_id=order.id, status=order.status.value,
                                admin_content=admin_content_info(content))


@router.post("/{order_id}/request-review", response_model=OrderResponse)
async def request_review(order_id: str,
                         identity: Identity = Depends(get_current_identity),
                         order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo)):
    order = await OrderActionUseCase(order_repo).request_review(OrderActionInput(order_id=order_id, actor=identity))
    return _order_response(order, identity, "고객 검토를 요청했습니다.")


@router.post("/{order_id}/approve", response_model=OrderResponse)
async def approve(order_id: str,
                  request: Optional[OrderFeedbackRequest] = None,
                  identity: Identity = Depends(get_current_identity),
                  order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo)):
    order = await OrderActionUseCase(order_repo).approve(OrderActionInput(
        order_id=order_id, actor=identity, message=request.message if request else None))
    return _order_response(order, identity, "주문이 승인되었습니다.")


@router.post("/{order_id}/revision", response_model=OrderResponse)
async def request_revision(order_id: str,
                           request: Optional[OrderFeedbackRequest] = None,
                           identity: Identity = Depends(get_current_identity),
                           order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo)):
    order = await OrderActionUseCase(order_repo).request_revision(OrderActionInput(
        order_id=order_id, actor=identity, message=request.message if request else None))
    return _order_response(order, identity, "수정 요청이 등록되었습니다.")
