"""결제 ORM 모델"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum, Float
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base
from domain.enums import PaymentStatus


class Payment(Base):
    __tablename__ = "payments"
    id = Column(String(32), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(10), default="usd", nullable=False)
    service_type = Column(String(30), nullable=False)
    service_name = Column(String(255), nullable=False)
    service_details = Column(Text, nullable=True)
    status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    stripe_session_id = Column(String(255), unique=True, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    paid_at = Column(DateTime, nullable=True)
    user = relationship("User", back_populates="payments")

    def __repr__(self):
        return f"<Payment {self.id} - {self.amount} {self.currency}>"
