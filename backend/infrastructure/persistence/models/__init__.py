"""
ORM 모델: 모든 모델을 re-export
"""
from infrastructure.persistence.database import Base
from infrastructure.persistence.models.user import User
from infrastructure.persistence.models.order import Order, OrderCodeSequence
from infrastructure.persistence.models.admin_content import AdminContent
from infrastructure.persistence.models.stored_file import StoredFile
from infrastructure.persistence.models.feedback import Feedback
from infrastructure.persistence.models.payment import Payment
from infrastructure.persistence.models.payment_setting import PaymentSetting
from domain.enums import UserRole, OrderStatus, OrderPriority, FeedbackType, PaymentStatus
