"""
===============================================================================
MÓDULO: Security headers (hardening de la consola)
===============================================================================

Objetivo
--------
Agregar headers de seguridad a todas las respuestas:
- CSP
- HSTS (solo producción + HTTPS)
- Anti-clickjacking / anti-sniffing
- Cache-Control: no-store en respuestas que dependen de la sesión

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  SecurityHeadersMiddleware

Responsabilidades:
  - Añadir headers de hardening sin romper /docs en dev
  - Evitar que proxies/navegador cacheen páginas de portal o respuestas
    con Set-Cookie de sesión

Colaboradores:
  - crosscutting.config.get_settings
===============================================================================
"""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

_STATIC_PREFIXES = ("/static/", "/icons/")


def _build_csp(is_production: bool) -> str:
    # En dev permitimos inline para docs/swagger.
    inline = "" if is_production else " 'unsafe-inline'"
    return (
        "default-src 'self'; "
        f"script-src 'self'{inline}; "
        f"style-src 'self'{inline}; "
        "img-src 'self' data:; "
        "connect-src 'self'; "
        "frame-ancestors 'none'"
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app):
        super().__init__(app)
        from .config import get_settings

        self._is_production = get_settings().is_production()
        self._csp = _build_csp(self._is_production)

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "same-origin"
        response.headers["Content-Security-Policy"] = self._csp

        if not request.url.path.startswith(_STATIC_PREFIXES):
            response.headers["Cache-Control"] = "no-store"

        if self._is_production:
            proto = (
                request.headers.get("x-forwarded-proto") or request.url.scheme or ""
            ).lower()
            if proto == "https":
                response.headers["Strict-Transport-Security"] = (
                    "max-age=31536000; includeSubDomains"
                )

        return response
