"""
API 스키마 re-export

사용법:
  from api.schemas import OrderInfo, PageAccessResponse
"""
from api.schemas.common import ResponseBase
from api.schemas.auth import (
    UserSignupRequest, UserLoginRequest, TokenResponse, UserResponse,
)
from api.schemas.orders import (
    FileInfo, FeedbackInfo, AdminContentInfo, OrderInfo, OrderResponse,
    OrderListResponse, OrderFeedbackRequest, AdminContentResponse, OrderActionsResponse,
    order_info, admin_content_info,
)
from api.schemas.payment import (
    CheckoutRequest, CheckoutResponse, PaymentCompleteRequest, PaymentItem,
    PaymentResponse, PaymentHistoryResponse, PaymentStatusResponse, payment_item,
)
from api.schemas.access import PageAccessResponse
from api.schemas.admin import (
    PaymentSettings, PaymentSettingsUpdate, PaymentSettingsResponse,
    PaymentStats, AdminPaymentsResponse, UserSummary, UserPaymentsResponse,
)
