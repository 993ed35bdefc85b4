from enum import Enum


class UserRole(str, Enum):
    SAAS_ADMIN = "saas_admin"
    TENANT_ADMIN = "tenant_admin"
    AGENT = "agent"
    CUSTOMER = "customer"


# Roles allowed to manage a tenant's own configuration
TENANT_ADMIN_ROLES = {UserRole.SAAS_ADMIN.value, UserRole.TENANT_ADMIN.value}
