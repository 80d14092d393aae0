from .auth import AuthManager, TokenStore
from .network_guard import is_local
from .rate_limiter import RateLimiter

__all__ = ["AuthManager", "TokenStore", "RateLimiter", "is_local"]
