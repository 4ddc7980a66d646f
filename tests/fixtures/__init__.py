"""Test fixtures for RBAC client tests."""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from rbac_client.client.http_client import SnapshotFetcher
from rbac_client.core.manager import WebManager

AUTHORITY_URL = "http://authority.test/api"


def build_snapshot_payload() -> Dict[str, Any]:
    """Snapshot document exercising every materialization path."""
    return {
        "items": {
            "admin": {
                "type": "role",
                "description": "Administrator",
                "children": ["editor", "ghost"]
            },
            "editor": {
                "type": "role",
                "children": ["post.edit"]
            },
            "post.edit": {
                "type": "permission",
                "description": "Edit posts",
                "ruleName": "isAuthor"
            },
            "post.read": {
                "type": "permission"
            }
        },
        "rules": {
            "isAuthor": {
                "data": {
                    "typeName": "AuthorRule",
                    "ruleData": json.dumps({"field": "author_id"})
                }
            },
            "legacy": {
                "data": {
                    "typeName": "UnregisteredRule",
                    "ruleData": json.dumps({"threshold": 3, "tags": ["a", "b"]})
                }
            }
        },
        "assignments": {
            "alice": ["editor", "post.read", "editor"],
            "bob": ["admin"]
        }
    }


class RecordingHandler:
    """MockTransport handler that records requests and replays responses."""
    
    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []
    
    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(request)
        return response


def make_fetcher(
    handler: Callable[[httpx.Request], httpx.Response],
    **kwargs
) -> SnapshotFetcher:
    """Create a fetcher whose client is served by ``handler``."""
    client = httpx.AsyncClient(
        base_url=AUTHORITY_URL,
        transport=httpx.MockTransport(handler)
    )
    return SnapshotFetcher(base_url=AUTHORITY_URL, client=client, **kwargs)


@pytest.fixture
def snapshot_payload():
    """Sample snapshot document."""
    return build_snapshot_payload()


@pytest.fixture
def snapshot_handler(snapshot_payload):
    """Handler that always serves the sample snapshot."""
    return RecordingHandler([httpx.Response(200, json=snapshot_payload)])


@pytest.fixture
def web_manager(snapshot_handler):
    """Manager wired to the sample snapshot handler."""
    return WebManager(fetcher=make_fetcher(snapshot_handler, authorization=lambda: "test-token"))
