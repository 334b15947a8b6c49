"""Main FastAPI application handler for Lambda deployment."""

import logging
import os
import time
from datetime import UTC, datetime

import boto3
from botocore.config import Config
from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from mangum import Mangum

from models.contact_message import ContactSubmission, MessageStatus
from services.auth_service import AuthenticationError, AuthService, Principal
from services.exceptions import (
    InvalidArgumentError,
    InvalidTransitionError,
    MessageNotFoundError,
    StoreError,
    SubmissionValidationError,
)
from services.intake_service import IntakeService
from services.message_store import MessageStore
from services.moderation_service import ModerationService
from utils.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_DIR,
    DEFAULT_SORT_FIELD,
    MAX_PAGE_SIZE,
)

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())

ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Initialize FastAPI app
app = FastAPI(
    title="Contact Intake API",
    description="API for submitting and moderating contact messages",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log all API requests with timing for CloudWatch monitoring."""
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000

    # Log slow requests (>1s) at WARNING level for monitoring
    path = request.url.path
    if duration_ms > 1000:
        logger.warning(
            "[SLOW] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 500:
        logger.error(
            "[ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 400:
        logger.info(
            "[CLIENT_ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )

    return response


# Lazy-initialized AWS clients and services
# Required for Lambda SnapStart - connections must be re-established after restore
_dynamodb = None
_message_store = None
_intake_service = None
_moderation_service = None
_auth_service = None

# Security scheme for bearer token authentication
security = HTTPBearer(auto_error=False)


def reset_services():
    """Reset all lazy-initialized services. Useful for testing.

    Also resets boto3's default session so that subsequent calls to
    boto3.resource() create fresh sessions within the current mock context
    (e.g., moto's mock_aws).
    """
    global _dynamodb, _message_store, _intake_service, _moderation_service
    global _auth_service
    _dynamodb = None
    _message_store = None
    _intake_service = None
    _moderation_service = None
    _auth_service = None
    boto3.DEFAULT_SESSION = None


def get_dynamodb():
    """Get or create DynamoDB resource (lazy init for SnapStart).

    Every call is bounded by the configured timeouts and attempted once;
    retrying is left to the API client.
    """
    global _dynamodb
    if _dynamodb is None:
        region = os.environ.get("AWS_DEFAULT_REGION", "us-west-2")
        config = Config(
            connect_timeout=float(
                os.environ.get("STORE_CONNECT_TIMEOUT_SECONDS", "2")
            ),
            read_timeout=float(os.environ.get("STORE_READ_TIMEOUT_SECONDS", "5")),
            retries={"total_max_attempts": 1, "mode": "standard"},
        )
        _dynamodb = boto3.resource("dynamodb", region_name=region, config=config)
    return _dynamodb


def get_message_store():
    """Get or create MessageStore (lazy init for SnapStart)."""
    global _message_store
    if _message_store is None:
        _message_store = MessageStore(
            get_dynamodb().Table(
                os.environ.get(
                    "CONTACT_MESSAGES_TABLE",
                    f"contact-intake-messages-{ENVIRONMENT}",
                )
            )
        )
    return _message_store


def get_intake_service():
    """Get or create IntakeService (lazy init for SnapStart)."""
    global _intake_service
    if _intake_service is None:
        _intake_service = IntakeService(store=get_message_store())
    return _intake_service


def get_moderation_service():
    """Get or create ModerationService (lazy init for SnapStart)."""
    global _moderation_service
    if _moderation_service is None:
        _moderation_service = ModerationService(
            store=get_message_store(),
            max_page_size=int(os.environ.get("MAX_PAGE_SIZE", MAX_PAGE_SIZE)),
        )
    return _moderation_service


def get_auth_service():
    """Get or create AuthService (lazy init for SnapStart)."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService(jwt_secret=os.environ.get("JWT_SECRET_KEY"))
    return _auth_service


# MARK: - Authentication Dependency


async def get_moderator(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),  # noqa: B008
) -> Principal:
    """Resolve the calling moderator from the bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid, 403 if the
            caller lacks the moderator role
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        principal = get_auth_service().verify_access_token(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    required_role = os.environ.get("MODERATOR_ROLE", "moderator")
    if not principal.has_role(required_role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Moderator role required",
        )
    return principal


# MARK: - Health Check


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": ENVIRONMENT,
    }


# MARK: - Contact Messages


@app.post("/api/v1/contact/messages", status_code=status.HTTP_201_CREATED)
async def submit_message(submission: ContactSubmission):
    """Submit a contact message."""
    message_id = get_intake_service().submit(submission)
    return {
        "id": message_id,
        "status": MessageStatus.OPEN.value,
        "message": "Message saved successfully",
    }


@app.get("/api/v1/contact/messages")
async def list_open_messages(
    page: int = Query(1, description="1-based page number"),
    page_size: int = Query(
        DEFAULT_PAGE_SIZE, alias="pageSize", description="Messages per page"
    ),
    sort_field: str = Query(DEFAULT_SORT_FIELD, alias="sortField"),
    sort_dir: str = Query(DEFAULT_SORT_DIR, alias="sortDir"),
    moderator: Principal = Depends(get_moderator),  # noqa: B008
):
    """List OPEN messages for moderation."""
    result = get_moderation_service().list_open(
        page=page, page_size=page_size, sort_field=sort_field, sort_dir=sort_dir
    )
    return result.model_dump(mode="json")


@app.post("/api/v1/contact/messages/{message_id}/close")
async def close_message(
    message_id: str,
    moderator: Principal = Depends(get_moderator),  # noqa: B008
):
    """Close an OPEN message as the calling moderator."""
    message = get_moderation_service().close(message_id, actor=moderator.user_id)
    return message.model_dump(mode="json")


# MARK: - Error Handlers


@app.exception_handler(SubmissionValidationError)
async def submission_validation_error_handler(
    request, exc: SubmissionValidationError
):
    """Handle rejected submissions."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": str(exc),
            "violations": [v.model_dump() for v in exc.violations],
        },
    )


@app.exception_handler(InvalidArgumentError)
async def invalid_argument_error_handler(request, exc: InvalidArgumentError):
    """Handle bad listing or close parameters."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
    )


@app.exception_handler(MessageNotFoundError)
async def not_found_error_handler(request, exc: MessageNotFoundError):
    """Handle unknown message ids."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
    )


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_error_handler(request, exc: InvalidTransitionError):
    """Handle closes of messages that are no longer OPEN."""
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
    )


@app.exception_handler(StoreError)
async def store_error_handler(request, exc: StoreError):
    """Handle message table failures; the client may retry."""
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Message storage temporarily unavailable"},
        headers={"Retry-After": "1"},
    )


# MARK: - Lambda Handler

# Create the Lambda handler
api_handler = Mangum(app, lifespan="off")


# For local development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
