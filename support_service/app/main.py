# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, engine
from shared.core.logging_config import setup_logging
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware
from shared.models import refresh_token, tenants, users  # noqa: F401

# tenant tables register on TenantBase; provisioning needs them all imported
from .models.tickets import ticket_hierarchy, ticket_history, tickets  # noqa: F401
from .models.parts_services import item_links, items, service_kits, stock  # noqa: F401
from .models.timecard import schedule_templates  # noqa: F401
from .models.contracts import contracts  # noqa: F401

from .router.tickets import ticket_hierarchy_router, tickets_router
from .router.parts_services import item_links_router, items_router, service_kits_router, stock_router
from .router.timecard import schedule_templates_router
from .router.contracts import contracts_router
from .router.tenant_admin import tenant_admin_router
from .router.geolocation import geolocation_router

setup_logging("support_service")

# Public tables only; tenant tables are created per schema on provisioning
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Support Desk API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(JsonResponseMiddleware)

setup_exception_handlers(app)

# Routers
app.include_router(tenant_admin_router.router)
app.include_router(tickets_router.router)
app.include_router(ticket_hierarchy_router.router)
app.include_router(items_router.router)
app.include_router(item_links_router.router)
app.include_router(stock_router.router)
app.include_router(service_kits_router.router)
app.include_router(schedule_templates_router.router)
app.include_router(contracts_router.router)
app.include_router(geolocation_router.router)


@app.get("/api/health")
def health():
    return {"status": "healthy"}
