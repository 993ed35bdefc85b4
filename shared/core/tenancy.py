import logging
from typing import Union
from uuid import UUID

from fastapi import Depends, status
from sqlalchemy import MetaData, text
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import SessionLocal, TENANT_SCHEMA, TenantBase, engine, is_sqlite
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)

SCHEMA_PREFIX = "tenant_"


def tenant_schema_name(tenant_id: Union[str, UUID]) -> str:
    """Schema holding one tenant's tables, e.g. ``tenant_0b6e..._..``.

    The id is parsed as a UUID first so nothing from the outside is
    ever spliced into SQL unchecked.
    """
    try:
        parsed = tenant_id if isinstance(tenant_id, UUID) else UUID(str(tenant_id))
    except (TypeError, ValueError):
        raise ValueError(f"Invalid tenant id: {tenant_id!r}")
    return SCHEMA_PREFIX + str(parsed).replace("-", "_")


def tenant_engine(tenant_id: Union[str, UUID]):
    return engine.execution_options(
        schema_translate_map={TENANT_SCHEMA: tenant_schema_name(tenant_id)}
    )


def get_tenant_db(tenant_id: Union[str, UUID]) -> Session:
    """Session whose tenant tables resolve to the given tenant's schema."""
    return SessionLocal(bind=tenant_engine(tenant_id))


def _tenant_metadata(schema: str) -> MetaData:
    metadata = MetaData()
    for table in TenantBase.metadata.sorted_tables:
        table.to_metadata(metadata, schema=schema)
    return metadata


def _quoted(schema: str) -> str:
    return engine.dialect.identifier_preparer.quote_schema(schema)


def tenant_schema_exists(tenant_id: Union[str, UUID]) -> bool:
    schema = tenant_schema_name(tenant_id)
    with engine.connect() as conn:
        if is_sqlite():
            names = [row[1] for row in conn.exec_driver_sql("PRAGMA database_list")]
            return schema in names
        row = conn.execute(
            text("SELECT 1 FROM information_schema.schemata WHERE schema_name = :name"),
            {"name": schema}
        ).first()
        return row is not None


def provision_tenant_schema(tenant_id: Union[str, UUID]) -> str:
    """Create the tenant schema and all tenant tables. Safe to call twice."""
    schema = tenant_schema_name(tenant_id)

    # sqlite: ATTACH is refused inside a transaction, so it runs on its own
    if is_sqlite():
        if not tenant_schema_exists(tenant_id):
            with engine.connect() as conn:
                conn.exec_driver_sql(f"ATTACH DATABASE ':memory:' AS {_quoted(schema)}")
                conn.commit()
    else:
        with engine.begin() as conn:
            conn.exec_driver_sql(f"CREATE SCHEMA IF NOT EXISTS {_quoted(schema)}")

    _tenant_metadata(schema).create_all(bind=engine)
    logger.info("Provisioned tenant schema %s", schema)
    return schema


def drop_tenant_schema(tenant_id: Union[str, UUID]) -> None:
    schema = tenant_schema_name(tenant_id)

    if is_sqlite():
        if tenant_schema_exists(tenant_id):
            with engine.connect() as conn:
                conn.exec_driver_sql(f"DETACH DATABASE {_quoted(schema)}")
                conn.commit()
    else:
        with engine.begin() as conn:
            conn.exec_driver_sql(f"DROP SCHEMA IF EXISTS {_quoted(schema)} CASCADE")

    logger.warning("Dropped tenant schema %s", schema)


# Dependency
def get_tenant_session(current_user: UserToken = Depends(validate_current_token)):
    if not current_user.tenant_id:
        return error_response(
            message="Tenant context is required for this operation",
            status_code=str(AppStatusCode.AUTHENTICATION_TENANT_MISSING),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    db = get_tenant_db(current_user.tenant_id)
    try:
        yield db
    finally:
        db.close()


def current_tenant_id(current_user: UserToken) -> UUID:
    if not current_user.tenant_id:
        return error_response(
            message="Tenant context is required for this operation",
            status_code=str(AppStatusCode.AUTHENTICATION_TENANT_MISSING),
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    return UUID(current_user.tenant_id)
