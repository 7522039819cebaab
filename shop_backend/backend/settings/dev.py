# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS

- DEBUG on, localhost CORS/CSRF
- Gateway falls back to a local sandbox key so signed notifications can be
  replayed by hand (never used when PAYMENT_GATEWAY_API_KEY is set)
- Order / payment loggers at DEBUG unless LOG_LEVEL says otherwise
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING, PAYMENTS, env

DEBUG = True

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=["localhost", "127.0.0.1"])

CORS_ALLOWED_ORIGINS = env.list(
    "CORS_ALLOWED_ORIGINS", default=["http://localhost:5173"]
)

CSRF_TRUSTED_ORIGINS = env.list(
    "CSRF_TRUSTED_ORIGINS", default=["http://localhost:5173"]
)

CORS_ALLOW_CREDENTIALS = True

# ----------------------------
# Payment gateway sandbox
# ----------------------------
PAYMENTS["GATEWAY"]["API_KEY"] = PAYMENTS["GATEWAY"]["API_KEY"] or "dev-gateway-key"

# ----------------------------
# Logging
# ----------------------------
if not env.str("LOG_LEVEL", default=""):
    for name in ("orders", "payments"):
        LOGGING["loggers"][name]["level"] = "DEBUG"
