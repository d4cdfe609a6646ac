"""Access API: Access Gate checks for the calling identity."""

from typing import Annotated

from fastapi import APIRouter, Depends

from debtdesk.api.v1.dependencies import get_access_gate, get_current_identity_id
from debtdesk.application.services import AccessGate
from debtdesk.schemas.role import AccessCheckResponse

router = APIRouter()


@router.get("/agencies/{agency_id}", response_model=AccessCheckResponse)
async def check_agency_access(
    agency_id: str,
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
):
    allowed = await gate.can_access_agency(identity_id, agency_id)
    return AccessCheckResponse(resource_type="agency", resource_id=agency_id, allowed=allowed)


@router.get("/clients/{client_id}", response_model=AccessCheckResponse)
async def check_client_access(
    client_id: str,
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
):
    """Allowed for platform admins, the client itself, and its managing agency."""
    allowed = await gate.can_access_client(identity_id, client_id)
    return AccessCheckResponse(resource_type="client", resource_id=client_id, allowed=allowed)


@router.get("/portfolios/{portfolio_id}", response_model=AccessCheckResponse)
async def check_portfolio_access(
    portfolio_id: str,
    identity_id: Annotated[str, Depends(get_current_identity_id)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
):
    """Allowed for platform admins and the owning agency or client."""
    allowed = await gate.can_access_portfolio(identity_id, portfolio_id)
    return AccessCheckResponse(
        resource_type="portfolio", resource_id=portfolio_id, allowed=allowed
    )
