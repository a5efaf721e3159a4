"""주문 관련 스키마"""
from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field
from api.schemas.common import ResponseBase


class FileInfo(BaseModel):
    id: Optional[str]
    filename: str
    original_name: str
    mimetype: str
    size: int
    path: str
    uploaded_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FeedbackInfo(BaseModel):
    id: Optional[str]
    type: str
    message: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class AdminContentInfo(BaseModel):
    id: Optional[str]
    description: Optional[str]
    created_at: datetime
    files: List[FileInfo] = []

    class Config:
        from_attributes = True


class OrderInfo(BaseModel):
    id: str
    order_code: str = Field(description="표시용 주문 번호 (예: 'ORD-001')")
    client_id: int
    title: str
    description: Optional[str]
    priority: str = Field(description="NORMAL | URGENT | CRITICAL")
    due_date: Optional[date]
    status: str = Field(description="PENDING | IN_PROGRESS | REVIEW | COMPLETED | REVISION")
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    files: List[FileInfo] = []
    admin_content: Optional[AdminContentInfo] = None
    feedbacks: List[FeedbackInfo] = Field(default=[], description="최신순")
    available_actions: List[str] = Field(default=[], description="현재 사용자가 수행 가능한 동작")


class OrderResponse(ResponseBase):
    order: OrderInfo


class OrderListResponse(ResponseBase):
    orders: List[OrderInfo]
    total: int


class OrderFeedbackRequest(BaseModel):
    message: Optional[str] = Field(default=None, max_length=5000)


class AdminContentResponse(ResponseBase):
    order_id: str
    status: str
    admin_content: AdminContentInfo


class OrderActionsResponse(BaseModel):
    order_id: str
    status: str
    actions: List[str]


def admin_content_info(content) -> AdminContentInfo:
    return AdminContentInfo(id=content.id, description=content.description, created_at=content.created_at,
                            files=[FileInfo.model_validate(f) for f in content.files])


def order_info(order, actions=()) -> OrderInfo:
    """OrderEntity → 응답 모델"""
    return OrderInfo(
        id=order.id, order_code=order.order_code, client_id=order.client_id,
        title=order.title, description=order.description,
        priority=order.priority.value, due_date=order.due_date, status=order.status.value,
        created_at=order.created_at, updated_at=order.updated_at,
        files=[FileInfo.model_validate(f) for f in order.files],
        admin_content=admin_content_info(order.admin_content) if order.admin_content else None,
        feedbacks=[FeedbackInfo(id=fb.id, type=fb.type.value, message=fb.message, created_at=fb.created_at)
                   for fb in order.feedbacks],
        available_actions=[a.value for a in actions],
    )
