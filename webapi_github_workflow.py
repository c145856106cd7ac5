from fastapi import FastAPI, Request, Depends, HTTPException, status
from fastapi.responses import RedirectResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool
from starlette.middleware.sessions import SessionMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from typing import Optional
import time
import logging

from config import (
    API_VERSION,
    CLIENT_ID,
    CLIENT_SECRET,
    CORS_ORIGINS,
    FORWARDED_FOR_HEADER,
    LOOPBACK_HOSTS,
    REDIRECT_URI,
    SESSION_SECRET,
)
from errors import ProvisioningError
from models import (
    Framework,
    Language,
    ProvisioningState,
    Selection,
    StandardResponse,
    TokenExchangeRequest,
    TokenExchangeResponse,
)
from oauth_exchange import ExchangeState, OAuthCallbackExchange, build_authorize_url, exchange_code_with_github
from project_templates import FRAMEWORK_OPTIONS, LANGUAGE_OPTIONS

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SESSION_KEY = 'provisioning'

# Rate limiting
limiter = Limiter(key_func=get_remote_address)
app = FastAPI(
    title="Frontend Starter Provisioning API",
    description="Creates a GitHub repository pre-populated with a frontend starter project",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Session middleware; holds ProvisioningState only, never the access token
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET)


# Middleware for request/response logging
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start_time = time.time()

    # Query strings carry OAuth codes, so only the path is logged
    logger.info(f"Request: {request.method} {request.url.path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(f"Response: {response.status_code} - {process_time:.4f}s")

    # Add API versioning headers
    response.headers["X-API-Version"] = API_VERSION
    response.headers["X-Response-Time"] = str(process_time)

    return response


def token_exchange_key(request: Request) -> str:
    """
    Rate-limit key for POST /github/oauth

    The callback handler calls this endpoint from the server itself, so a
    loopback caller is keyed on the browser address it forwards.
    """
    host = get_remote_address(request)
    forwarded = request.headers.get(FORWARDED_FOR_HEADER)
    if host in LOOPBACK_HOSTS and forwarded:
        return forwarded.split(",")[0].strip()
    return host


def get_callback_exchange() -> OAuthCallbackExchange:
    """A fresh state machine per callback request"""
    return OAuthCallbackExchange()


def load_state(request: Request) -> ProvisioningState:
    return ProvisioningState.model_validate(request.session.get(SESSION_KEY) or {})


def save_state(request: Request, state: ProvisioningState):
    request.session[SESSION_KEY] = state.model_dump(mode='json')


@app.get("/", response_model=StandardResponse)
@limiter.limit("100/minute")
async def home(request: Request, error: Optional[str] = None):
    """
    Home endpoint providing API information

    Failed provisioning runs are redirected here with an ``error`` query
    parameter, which is echoed back.
    """
    return StandardResponse(
        success=error is None,
        message=error or "Frontend Starter Provisioning API",
        data={
            "version": API_VERSION,
            "documentation": "/docs",
            "endpoints": {
                "options": "GET /options - Available frameworks and languages",
                "login": "GET /login?framework=&language= - Start GitHub OAuth and provisioning",
                "callback": "GET /callback - OAuth callback handler",
                "token_exchange": "POST /github/oauth - Exchange an authorization code",
                "status": "GET /status - Current provisioning state",
                "health": "GET /health - Health check"
            }
        }
    )


@app.get("/options", response_model=StandardResponse)
@limiter.limit("100/minute")
async def options(request: Request):
    return StandardResponse(
        success=True,
        message="Available project options",
        data={
            "frameworks": FRAMEWORK_OPTIONS,
            "languages": LANGUAGE_OPTIONS
        }
    )


@app.get("/login")
@limiter.limit("10/minute")
async def login(request: Request, framework: Optional[Framework] = None, language: Optional[Language] = None):
    """
    Start the GitHub OAuth flow for a framework/language selection

    The selection travels to GitHub and back in the ``state`` parameter.
    """
    selection = Selection(framework=framework, language=language)
    auth_url = build_authorize_url(selection)

    save_state(request, ProvisioningState(selection=selection, in_progress=True))

    logger.info(f"Initiating GitHub OAuth for {framework.value}/{language.value} with callback: {REDIRECT_URI}")
    return RedirectResponse(auth_url)


@app.get("/callback")
@limiter.limit("10/minute")
async def callback(request: Request, code: Optional[str] = None, state: Optional[str] = None,
                   exchange: OAuthCallbackExchange = Depends(get_callback_exchange)):
    """
    Handle OAuth2 callback from GitHub

    Exchanges the code, provisions the repository and redirects the browser
    to it, or back to the root with an error message.
    """
    outcome = await exchange.handle(code, state, client_host=get_remote_address(request))

    save_state(request, ProvisioningState(
        selection=exchange.selection,
        in_progress=False,
        last_error=exchange.error.message if exchange.error else None,
        repository_url=exchange.repository_url
    ))

    if outcome is ExchangeState.COMPLETED:
        logger.info(f"Redirecting to new repository: {exchange.repository_url}")
    return RedirectResponse(exchange.redirect_url, status_code=status.HTTP_302_FOUND)


@app.post("/github/oauth", response_model=TokenExchangeResponse)
@limiter.limit("10/minute", key_func=token_exchange_key)
async def github_oauth(request: Request, exchange_request: TokenExchangeRequest):
    """
    Exchange an authorization code for an access token

    Raises:
        TokenExchangeError: If GitHub rejects the code
    """
    access_token = await run_in_threadpool(exchange_code_with_github, exchange_request.code)
    return TokenExchangeResponse(access_token=access_token)


@app.get("/status", response_model=StandardResponse)
@limiter.limit("60/minute")
async def provisioning_status(request: Request):
    state = load_state(request)
    return StandardResponse(
        success=state.last_error is None,
        message=state.last_error or ("Provisioning in progress" if state.in_progress else "No provisioning in progress"),
        data=state.model_dump(mode='json')
    )


@app.get("/health", response_model=StandardResponse)
@limiter.limit("200/minute")
async def health_check(request: Request):
    """
    Health check endpoint for monitoring
    """
    return StandardResponse(
        success=True,
        message="API is healthy",
        data={
            "status": "healthy",
            "timestamp": int(time.time()),
            "version": API_VERSION,
            "github_oauth_configured": bool(CLIENT_ID and CLIENT_SECRET)
        }
    )


@app.get("/logout", response_model=StandardResponse)
@limiter.limit("30/minute")
async def logout(request: Request):
    """
    Clear the provisioning session
    """
    request.session.clear()

    return StandardResponse(
        success=True,
        message="Session cleared"
    )


# Error handlers
@app.exception_handler(ProvisioningError)
async def provisioning_exception_handler(request: Request, exc: ProvisioningError):
    logger.error(f"{type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=StandardResponse(
            success=False,
            message=exc.message,
            error_code=type(exc).__name__
        ).model_dump()
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Custom HTTP exception handler"""
    logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=StandardResponse(
            success=False,
            message=str(exc.detail),
            error_code=str(exc.status_code)
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """General exception handler"""
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content=StandardResponse(
            success=False,
            message="Internal server error",
            error_code="500"
        ).model_dump()
    )


if __name__ == '__main__':
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
