"""
api/dependencies.py -- FastAPI Depends() helpers.

Route handlers never reach into app.state directly; they declare
services: IdentityServices = Depends(get_services) and the lifespan (or the
test fixture) decides which store sits underneath.
"""

from __future__ import annotations

from fastapi import Request

from auth.services import IdentityServices


def get_services(request: Request) -> IdentityServices:
    return request.app.state.services
