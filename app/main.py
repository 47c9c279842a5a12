# app/main.py

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.api.dependencies import get_metrics
from app.api.middleware import CorrelationIdMiddleware, RequestAuditMiddleware
from app.api.routers import audit, health
from app.config.logging import configure_logging
from app.config.settings import get_settings
from app.domain.exceptions import DomainError, DomainValidationError
from app.governance.exceptions import (
    AuditRecordNotFoundError,
    GovernanceError,
    PersistenceError,
)
from app.security.exceptions import (
    ForbiddenError,
    ProfileNotFoundError,
    SecurityError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> RequestAudit.
app.add_middleware(
    RequestAuditMiddleware,
    metrics=get_metrics() if settings.enable_metrics else None,
)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(UnauthorizedError)
async def unauthorized_error_handler(request, exc: UnauthorizedError):
    return JSONResponse(status_code=401, content={"detail": exc.message})


@app.exception_handler(ForbiddenError)
async def forbidden_error_handler(request, exc: ForbiddenError):
    return JSONResponse(status_code=403, content={"detail": exc.message})


@app.exception_handler(ProfileNotFoundError)
async def profile_not_found_error_handler(request, exc: ProfileNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(SecurityError)
async def security_error_handler(request, exc: SecurityError):
    return JSONResponse(status_code=403, content={"detail": exc.message})


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(AuditRecordNotFoundError)
async def audit_record_not_found_error_handler(request, exc: AuditRecordNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request, exc: PersistenceError):
    logger.error("audit_store_unavailable", extra={"error": exc.message})
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(GovernanceError)
async def governance_error_handler(request, exc: GovernanceError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    logger.exception("unhandled_error")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /audit
app.include_router(health.router)
app.include_router(audit.router, prefix="/audit")
