from sqlalchemy import JSON, MetaData, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from shared.core.config import DATABASE_URL, settings

# Placeholder schema for tenant tables, translated per request
TENANT_SCHEMA = "tenant"

# public schema: tenants, users, refresh tokens
Base = declarative_base()
# one copy per tenant schema
TenantBase = declarative_base(metadata=MetaData(schema=TENANT_SCHEMA))

JsonB = JSONB().with_variant(JSON(), "sqlite")


def _create_engine(url: str):
    if url.startswith("sqlite"):
        # single shared connection so attached tenant databases stay visible
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=settings.DB_POOL_SIZE,          # max idle connections
        max_overflow=settings.DB_MAX_OVERFLOW,    # max temporary extra connections
        pool_timeout=30                           # wait time before failing
    )


engine = _create_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def is_sqlite() -> bool:
    return engine.dialect.name == "sqlite"


# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
