class AppStatusCode:
    """Application level status codes returned in the ``status_code`` field
    of every JSON envelope, next to the HTTP status."""

    # Success
    OPERATION_SUCCESSFUL = "1000"
    DATA_RETRIEVED_SUCCESSFULLY = "1001"
    CREATED_SUCCESSFULLY = "1002"
    UPDATED_SUCCESSFULLY = "1003"
    DELETED_SUCCESSFULLY = "1004"

    # Authentication / authorization
    AUTHENTICATION_TOKEN_INVALID = "2001"
    AUTHENTICATION_TOKEN_EXPIRED = "2002"
    AUTHENTICATION_USER_INVALID = "2003"
    AUTHENTICATION_USER_INACTIVE = "2004"
    AUTHENTICATION_UNAUTHORIZED_ACCESS = "2005"
    AUTHENTICATION_TENANT_MISSING = "2006"
    AUTHENTICATION_INVALID_CREDENTIALS = "2007"
    AUTHENTICATION_TENANT_INACTIVE = "2008"

    # Validation
    INVALID_INPUT = "3001"
    REQUIRED_VALIDATION_ERROR = "3002"
    DUPLICATE_ADD_ERROR = "3003"
    INVALID_REFERENCE = "3004"

    # Operations
    OPERATION_FAILED = "4001"
    OPERATION_ERROR = "4002"
    NOT_FOUND = "4004"
    DELETE_RESTRICTED = "4005"
    INSUFFICIENT_STOCK = "4006"

    # Server
    INTERNAL_SERVER_ERROR = "5000"
