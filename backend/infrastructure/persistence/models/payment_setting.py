"""결제 요구 설정 ORM 모델 (게이트 페이지별 불리언 토글)"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from infrastructure.persistence.database import Base


class PaymentSetting(Base):
    __tablename__ = "payment_settings"
    id = Column(Integer, primary_key=True, index=True)
    setting_key = Column(String(255), unique=True, nullable=False)
    setting_value = Column(Boolean, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<PaymentSetting {self.setting_key}={self.setting_value}>"
