import uuid
from sqlalchemy import TIMESTAMP, Boolean, Column, Enum, ForeignKey, String, Uuid, func
from sqlalchemy.orm import relationship
from passlib.context import CryptContext
from ..core.database import Base
from ..utils.enums import UserRole
from .tenants import Tenant  # noqa: F401  (relationship target)
from .refresh_token import RefreshToken  # noqa: F401

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')


class Users(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # saas admins live outside any tenant
    tenant_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenants.id", ondelete="CASCADE"), nullable=True, index=True)

    email = Column(String(200), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    role = Column(
        Enum(UserRole, name="user_role_enum", native_enum=False,
             values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=UserRole.AGENT,
    )
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    tenant = relationship("Tenant", back_populates="users")
    refresh_tokens = relationship(
        "RefreshToken", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def set_password(self, password: str):
        self.password = bcrypt_context.hash(password)

    def verify_password(self, password: str) -> bool:
        return bcrypt_context.verify(password, self.password)
