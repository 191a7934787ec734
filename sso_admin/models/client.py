import secrets
import string
from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sso_admin.database import Base

VALID_SCOPES = ("open_id", "email", "profile_with_doc")

VALID_GRANT_TYPES = (
    "authorization_code",
    "implicit",
    "client_credentials",
    "password",
    "refresh_token",
    "device_code",
    "urn:ietf:params:oauth:grant-type:uma-ticket",
)

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits


def _random_token(prefix, length):
    return prefix + "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))


def generate_client_id():
    return _random_token("client_", 10)


def generate_client_secret():
    return _random_token("secret_", 22)


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    client_id = Column(String(64), unique=True, index=True, nullable=False)
    client_secret = Column(String(64), nullable=False)
    description = Column(Text, nullable=False, default="")
    scopes = Column(JSON, nullable=False, default=list)  # 存儲為 JSON，適用於 SQLite
    grant_types = Column(JSON, nullable=False, default=list)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="owned_clients")

    # 刪除 client 時一併刪除其用戶指派
    assignments = relationship(
        "ClientUser",
        back_populates="client",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
