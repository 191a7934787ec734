from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sso_admin.database import Base

# 前端下拉選單使用的值，僅供參考，不做限制
SUGGESTED_CLIENT_USER_ROLES = ("admin", "editor", "viewer", "developer")

class ClientUser(Base):
    __tablename__ = "client_users"
    __table_args__ = (
        UniqueConstraint("user_id", "client_id", name="uq_client_users_user_client"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(50), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="client_assignments")
    client = relationship("Client", back_populates="assignments")
