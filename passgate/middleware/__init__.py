"""Middleware package."""
from passgate.middleware.request_id import RequestIDMiddleware
from passgate.middleware.security_headers import SecurityHeadersMiddleware

__all__ = ["RequestIDMiddleware", "SecurityHeadersMiddleware"]
