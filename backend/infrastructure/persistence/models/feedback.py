"""주문 피드백 ORM 모델 (생성 후 변경 없음)"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base
from domain.enums import FeedbackType


class Feedback(Base):
    __tablename__ = "feedbacks"
    id = Column(String(32), primary_key=True)
    order_id = Column(String(32), ForeignKey("orders.id"), nullable=False, index=True)
    type = Column(Enum(FeedbackType), nullable=False)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    order = relationship("Order", back_populates="feedbacks")

    def __repr__(self):
        return f"<Feedback {self.order_id} - {self.type}>"
