"""
api/limiter.py -- Shared slowapi rate limiter instance.

Import this in both api/main.py (to mount as middleware) and
api/routes/auth.py (to apply the shared auth limit with
@limiter.shared_limit()).

Using a single shared instance ensures all routes share the same in-memory
counter store. The default strategy is a fixed window, keyed on the client
address.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://", strategy="fixed-window")

# Limit string for POST /login and POST /signup, e.g. "20/15 minutes".
AUTH_LIMIT = get_settings().auth_rate_limit
