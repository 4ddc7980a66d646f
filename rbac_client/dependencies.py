"""
FastAPI dependencies backed by a loaded RBAC manager.

The manager is expected on ``app.state.rbac_manager`` and the
authenticated user on ``request.state.user_context``.
"""

from fastapi import HTTPException, Request, status

from rbac_client.config import get_logger
from rbac_client.core.manager import BaseManager
from rbac_client.models.items import Assignment

logger = get_logger(__name__)


def get_manager(request: Request) -> BaseManager:
    """Return the RBAC manager attached to the application."""
    manager = getattr(request.app.state, "rbac_manager", None)
    if manager is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="RBAC manager is not configured"
        )
    return manager


def require_assignment(item_name: str):
    """Dependency factory for requiring a direct assignment to ``item_name``."""
    async def check_assignment_dependency(request: Request) -> Assignment:
        user_context = getattr(request.state, 'user_context', None)
        
        if not user_context:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required"
            )
        
        manager = get_manager(request)
        assignment = await manager.get_assignment(item_name, user_context.username)
        
        if assignment is None:
            logger.info(f"User '{user_context.username}' has no assignment to '{item_name}'")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Assignment to '{item_name}' required"
            )
        
        return assignment
    
    return check_assignment_dependency
