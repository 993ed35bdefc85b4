import uuid
from sqlalchemy import TIMESTAMP, Boolean, Column, String, Uuid, func
from sqlalchemy.orm import relationship
from ..core.database import Base, JsonB


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    subdomain = Column(String(100), unique=True, index=True, nullable=False)
    settings = Column(JsonB, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    users = relationship("Users", back_populates="tenant")

    @property
    def schema_name(self) -> str:
        from shared.core.tenancy import tenant_schema_name
        return tenant_schema_name(self.id)
