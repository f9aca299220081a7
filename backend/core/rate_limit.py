"""
Rate limiting middleware using slowapi.
Keeps a single workspace from flooding the Gemini-backed endpoints.
"""
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import logging

from core.config import RateLimitConfigs

logger = logging.getLogger(__name__)


def get_rate_limit_key(request):
    """
    Get the key for rate limiting.

    1. Use the workspace id from the route path when there is one.
    2. Fall back to IP address.
    """
    workspace_id = (getattr(request, "path_params", None) or {}).get("workspace_id")
    if workspace_id:
        return f"workspace:{workspace_id}"
    return get_remote_address(request)


def get_rate_limiter():
    """
    Create and configure the rate limiter.

    Configuration:
    - RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: true)
    - RATE_LIMIT_PER_MINUTE: Requests per minute per key (default: 120)

    Returns:
        Limiter instance, or None when rate limiting is disabled
    """
    if not RateLimitConfigs.ENABLED:
        logger.warning("Rate limiting is DISABLED. Enable in production!")
        return None

    limiter = Limiter(
        key_func=get_rate_limit_key,
        default_limits=[f"{RateLimitConfigs.PER_MINUTE}/minute"],
        storage_uri="memory://",
        # Endpoints return plain dicts, so no header injection
        headers_enabled=False,
    )

    logger.info("Rate limiting enabled: %d requests per minute", RateLimitConfigs.PER_MINUTE)

    return limiter


# Create global limiter instance
limiter = get_rate_limiter()


def setup_rate_limiting(app):
    """
    Setup rate limiting for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    if limiter is None:
        logger.warning("Skipping rate limiting setup (disabled)")
        return

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    logger.info("Rate limiting middleware configured")


def flow_rate_limit(limit: str | None = None):
    """
    Decorator applying the model-call rate limit to an endpoint.

    The decorated endpoint must accept a ``request: Request`` parameter.

    Args:
        limit: Rate limit string (e.g., "10/minute"); defaults to RATE_LIMIT_FLOW_CALLS
    """
    if limiter is None:
        def decorator(func):
            return func
        return decorator

    return limiter.limit(limit or RateLimitConfigs.FLOW_CALLS)
