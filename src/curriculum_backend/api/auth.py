from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from curriculum_backend.permissions.auth import get_current_context
from curriculum_backend.permissions.principal import RequestContext

auth_router = APIRouter()


class WhoAmI(BaseModel):
    user_id: str
    username: Optional[str] = None
    provider: str
    roles: List[str]
    permissions: List[str]


@auth_router.get("/me", response_model=WhoAmI)
def get_current_identity(context: Annotated[RequestContext, Depends(get_current_context)]):
    """Identity of the caller with the roles and permissions resolved for this request"""
    return WhoAmI(
        user_id=context.identity.user_id,
        username=context.identity.username,
        provider=context.identity.provider,
        roles=sorted(context.effective.roles),
        permissions=sorted(context.effective.permissions),
    )
