from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from sso_admin.database import Base
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    password_hash = Column(String)

    # 每個用戶只有一個角色
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    role = relationship("Role", back_populates="users")

    # 擁有的 client；仍擁有 client 的用戶不能刪除
    owned_clients = relationship("Client", back_populates="owner", passive_deletes="all")
    client_assignments = relationship(
        "ClientUser",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def set_password(self, password):
        self.password_hash = pwd_context.hash(password)

    def verify_password(self, password):
        if not self.password_hash:
            return False
        return pwd_context.verify(password, self.password_hash)
