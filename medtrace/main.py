# medtrace/main.py

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from medtrace.api.middleware import (
    ActorContextMiddleware,
    AuditTriggerMiddleware,
    CorrelationIdMiddleware,
)
from medtrace.api.routers import costs, health, products
from medtrace.application.exceptions import (
    ApplicationError,
    PaymentFailedError,
    ProviderUnavailableError,
    SettlementRequiredError,
    UserRejectedError,
)
from medtrace.config.logging import configure_logging
from medtrace.config.settings import get_settings
from medtrace.domain.exceptions import DomainError, DomainValidationError, ProductNotFoundError

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    debug=settings.debug,
)

# Middleware order: last added runs first (outermost). Request flow: CorrelationId -> ActorContext -> AuditTrigger.
app.add_middleware(AuditTriggerMiddleware)
app.add_middleware(ActorContextMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(DomainValidationError)
async def domain_validation_error_handler(request, exc: DomainValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.message})


@app.exception_handler(ProductNotFoundError)
async def product_not_found_error_handler(request, exc: ProductNotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(DomainError)
async def domain_error_handler(request, exc: DomainError):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(SettlementRequiredError)
async def settlement_required_error_handler(request, exc: SettlementRequiredError):
    return JSONResponse(status_code=402, content={"detail": exc.message})


@app.exception_handler(PaymentFailedError)
async def payment_failed_error_handler(request, exc: PaymentFailedError):
    return JSONResponse(status_code=402, content={"detail": exc.message})


@app.exception_handler(UserRejectedError)
async def user_rejected_error_handler(request, exc: UserRejectedError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(ProviderUnavailableError)
async def provider_unavailable_error_handler(request, exc: ProviderUnavailableError):
    return JSONResponse(status_code=503, content={"detail": exc.message})


@app.exception_handler(ApplicationError)
async def application_error_handler(request, exc: ApplicationError):
    return JSONResponse(status_code=500, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Routers: /health, /products, /costs
app.include_router(health.router)
app.include_router(products.router, prefix="/products")
app.include_router(costs.router, prefix="/costs")
