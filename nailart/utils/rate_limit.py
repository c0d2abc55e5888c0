from slowapi import Limiter
from slowapi.util import get_remote_address

# Shared by the app (state + handler) and the rate-limited routes
limiter = Limiter(key_func=get_remote_address)
