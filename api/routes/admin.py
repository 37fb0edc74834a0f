"""
api/routes/admin.py -- Rank administration, moderation and bootstrap.

Routes:
  POST /admin/set-rank        -- rank 5 only; 400 bad rank, 403 caller, 404 target
  POST /admin/publish-update  -- 403 without adminUsername
  POST /admin/init-rank5      -- secret-gated, consume-once; 403 bad/consumed secret
  POST /admin/ban             -- rank >= 1
  POST /admin/unban           -- rank >= 1

Authorization lives in auth/admin.py and auth/bootstrap.py, not here: the
local simulation must apply exactly the same checks.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_services
from auth.services import IdentityServices
from contract import operations
from contract.models import (
    BanRequest,
    InitRank5Request,
    MessageResponse,
    PublishUpdateRequest,
    SetRankRequest,
    UnbanRequest,
)

router = APIRouter()


@router.post("/admin/set-rank", response_model=MessageResponse)
def set_rank(body: SetRankRequest, services: IdentityServices = Depends(get_services)) -> MessageResponse:
    return operations.set_rank(services, body)


@router.post("/admin/publish-update", response_model=MessageResponse)
async def publish_update(
    body: PublishUpdateRequest,
    services: IdentityServices = Depends(get_services),
) -> MessageResponse:
    """Acknowledge an update broadcast. No store access, safe to run on the event loop."""
    return operations.publish_update(services, body)


@router.post("/admin/init-rank5", response_model=MessageResponse)
def init_rank5(body: InitRank5Request, services: IdentityServices = Depends(get_services)) -> MessageResponse:
    return operations.init_rank5(services, body)


@router.post("/admin/ban", response_model=MessageResponse)
def ban(body: BanRequest, services: IdentityServices = Depends(get_services)) -> MessageResponse:
    return operations.ban(services, body)


@router.post("/admin/unban", response_model=MessageResponse)
def unban(body: UnbanRequest, services: IdentityServices = Depends(get_services)) -> MessageResponse:
    return operations.unban(services, body)
