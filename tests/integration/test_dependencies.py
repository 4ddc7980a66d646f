"""Integration tests for the FastAPI assignment dependencies."""

import asyncio
from types import SimpleNamespace

import pytest
from fastapi import Depends, FastAPI, Request, status
from fastapi.testclient import TestClient

from rbac_client.dependencies import require_assignment
from rbac_client.models.items import Assignment


def create_app(manager=None) -> FastAPI:
    """Application with a header-based stand-in for authentication."""
    app = FastAPI()
    if manager is not None:
        app.state.rbac_manager = manager
    
    @app.middleware("http")
    async def user_context_middleware(request: Request, call_next):
        username = request.headers.get("X-User")
        if username:
            request.state.user_context = SimpleNamespace(username=username)
        return await call_next(request)
    
    @app.get("/posts/edit")
    async def edit_posts(assignment: Assignment = Depends(require_assignment("editor"))):
        return {"username": assignment.username, "item": assignment.item_name}
    
    return app


@pytest.fixture
def client(web_manager):
    """Test client over a loaded manager."""
    asyncio.run(web_manager.load())
    return TestClient(create_app(web_manager))


class TestRequireAssignment:
    """Test the require_assignment dependency."""
    
    def test_assigned_user_allowed(self, client):
        """Test access for a directly assigned user."""
        response = client.get("/posts/edit", headers={"X-User": "alice"})
        
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"username": "alice", "item": "editor"}
    
    def test_unassigned_user_forbidden(self, client):
        """Test that a user without the assignment is rejected."""
        response = client.get("/posts/edit", headers={"X-User": "bob"})
        
        assert response.status_code == status.HTTP_403_FORBIDDEN
    
    def test_missing_user_unauthorized(self, client):
        """Test that unauthenticated requests are rejected."""
        response = client.get("/posts/edit")
        
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
    
    def test_missing_manager_unavailable(self):
        """Test that an application without a manager reports 503."""
        client = TestClient(create_app())
        
        response = client.get("/posts/edit", headers={"X-User": "alice"})
        
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
