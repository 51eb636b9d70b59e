"""
Name: ASGI Entrypoint

Responsibilities:
  - Expose the FastAPI app for ASGI servers (uvicorn oficina.main:app)

Notes/Constraints:
  - No configuration or IO should live here; keep it thin and predictable
"""

from oficina.api.main import app

__all__ = ["app"]
