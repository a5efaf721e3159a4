"""주문 ORM 모델"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base
from domain.enums import OrderStatus, OrderPriority


class Order(Base):
    __tablename__ = "orders"
    id = Column(String(32), primary_key=True)
    order_code = Column(String(20), unique=True, nullable=False)
    client_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(Enum(OrderPriority), default=OrderPriority.NORMAL, nullable=False)
    due_date = Column(Date, nullable=True)
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    client = relationship("User", back_populates="orders")
    files = relationship("StoredFile", back_populates="order", cascade="all, delete-orphan",
                         order_by="StoredFile.uploaded_at")
    admin_content = relationship("AdminContent", back_populates="order", uselist=False,
                                 cascade="all, delete-orphan")
    feedbacks = relationship("Feedback", back_populates="order", cascade="all, delete-orphan",
                             order_by="Feedback.created_at.desc()")

    def __repr__(self):
        return f"<Order {self.order_code} - {self.status}>"


class OrderCodeSequence(Base):
    """주문 표시 코드(ORD-NNN) 발급용 시퀀스. 발급된 번호는 재사용하지 않는다"""
    __tablename__ = "order_code_sequence"
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, autoincrement=True)
    issued_at = Column(DateTime, default=datetime.utcnow, nullable=False)
