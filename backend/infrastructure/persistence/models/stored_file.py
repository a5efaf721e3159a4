"""업로드 파일 ORM 모델: 주문(고객 첨부) 또는 관리자 콘텐츠 중 하나에 소속"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from infrastructure.persistence.database import Base


class StoredFile(Base):
    __tablename__ = "files"
    __table_args__ = (
        CheckConstraint(
            "(order_id IS NULL) <> (admin_content_id IS NULL)",
            name="ck_files_single_parent",
        ),
    )
    id = Column(String(32), primary_key=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    mimetype = Column(String(100), nullable=False)
    size = Column(Integer, default=0, nullable=False)
    path = Column(String(500), unique=True, nullable=False)
    order_id = Column(String(32), ForeignKey("orders.id"), nullable=True, index=True)
    admin_content_id = Column(String(32), ForeignKey("admin_contents.id"), nullable=True, index=True)
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    order = relationship("Order", back_populates="files")
    admin_content = relationship("AdminContent", back_populates="files")

    def __repr__(self):
        return f"<StoredFile {self.filename}>"
