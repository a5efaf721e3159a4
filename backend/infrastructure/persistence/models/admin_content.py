"""관리자 납품 콘텐츠 ORM 모델"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base


class AdminContent(Base):
    __tablename__ = "admin_contents"
    id = Column(String(32), primary_key=True)
    order_id = Column(String(32), ForeignKey("orders.id"), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    order = relationship("Order", back_populates="admin_content")
    files = relationship("StoredFile", back_populates="admin_content", cascade="all, delete-orphan",
                         order_by="StoredFile.uploaded_at")

    def __repr__(self):
        return f"<AdminContent {self.order_id}>"
