"""
HTTP client for the policy authority.

This module fetches the RBAC snapshot over HTTP, attaching a bearer token
from a caller-supplied provider to every outbound request.
"""

import time
from typing import Any, Callable, Dict, Optional

import httpx

from rbac_client.config import AuthorityConfig, get_logger
from rbac_client.config.logging import StructuredLogger
from rbac_client.models.snapshot import Snapshot

logger = get_logger(__name__)
fetch_logger = StructuredLogger(__name__)

AuthorizationProvider = Callable[[], Optional[str]]

DEFAULT_TIMEOUT: Dict[str, float] = {
    "connect": 5.0,
    "read": 30.0,
    "write": 5.0,
    "pool": 5.0
}


class SnapshotFetcher:
    """Fetches RBAC snapshots from the policy authority."""
    
    def __init__(
        self,
        base_url: str,
        snapshot_path: str = "/rbac",
        authorization: Optional[AuthorizationProvider] = None,
        timeout: Optional[Dict[str, float]] = None,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the fetcher.
        
        Args:
            base_url: Base URL of the policy authority
            snapshot_path: Path of the snapshot endpoint relative to ``base_url``
            authorization: Zero-argument callable returning a bearer token or None
            timeout: Timeout configuration in seconds (connect/read/write/pool)
            headers: Additional headers to send with every request
            client: Preconfigured client to use instead of creating one. The
                client is modified in place: ``headers`` are merged into its
                default headers and the bearer-token hook is appended to its
                request hooks unless this fetcher already installed it. The
                fetcher does not close a client it was given.
        """
        self.base_url = base_url.rstrip('/')
        self.snapshot_path = '/' + snapshot_path.lstrip('/')
        self.authorization = authorization
        self._owns_client = client is None
        
        if client is None:
            client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._get_timeout_config(timeout or {}),
                headers=headers or {}
            )
        elif headers:
            client.headers.update(headers)
        
        request_hooks = client.event_hooks.get("request", [])
        if self._authorize_request not in request_hooks:
            client.event_hooks = {
                **client.event_hooks,
                "request": [*request_hooks, self._authorize_request]
            }
        self._client = client
    
    @classmethod
    def from_config(
        cls,
        config: AuthorityConfig,
        authorization: Optional[AuthorizationProvider] = None,
        client: Optional[httpx.AsyncClient] = None
    ) -> "SnapshotFetcher":
        """Create a fetcher from authority configuration."""
        return cls(
            base_url=config.base_url,
            snapshot_path=config.snapshot_path,
            authorization=authorization,
            timeout=config.timeout,
            headers=config.headers,
            client=client
        )
    
    @property
    def url(self) -> str:
        """Full snapshot URL."""
        return f"{self.base_url}{self.snapshot_path}"
    
    def _get_timeout_config(self, timeout: Dict[str, float]) -> httpx.Timeout:
        """
        Build the HTTPX timeout configuration.
        
        Args:
            timeout: Timeout values in seconds, missing keys use defaults
            
        Returns:
            HTTPX timeout configuration
        """
        return httpx.Timeout(
            connect=timeout.get("connect", DEFAULT_TIMEOUT["connect"]),
            read=timeout.get("read", DEFAULT_TIMEOUT["read"]),
            write=timeout.get("write", DEFAULT_TIMEOUT["write"]),
            pool=timeout.get("pool", DEFAULT_TIMEOUT["pool"])
        )
    
    async def _authorize_request(self, request: httpx.Request) -> None:
        """Attach the bearer token, or strip the header when there is none."""
        token = self.authorization() if self.authorization else None
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        elif "Authorization" in request.headers:
            del request.headers["Authorization"]
    
    async def fetch(
        self,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Optional[Snapshot]:
        """
        Fetch the current snapshot.
        
        Args:
            params: Optional query parameters for this request
            headers: Optional extra headers for this request
            
        Returns:
            The parsed snapshot, or None when the authority has no data (404)
            
        Raises:
            httpx.HTTPStatusError: For any other error status
            httpx.RequestError: For transport failures
            pydantic.ValidationError: If the payload is not a snapshot document
        """
        start_time = time.time()
        try:
            response = await self._client.get(self.snapshot_path, params=params, headers=headers)
        except httpx.RequestError as e:
            fetch_logger.log_snapshot_fetch(
                url=self.url,
                status_code=None,
                response_time=(time.time() - start_time) * 1000,
                success=False,
                error=str(e)
            )
            raise
        
        response_time = (time.time() - start_time) * 1000
        
        if response.status_code == httpx.codes.NOT_FOUND:
            fetch_logger.log_snapshot_fetch(
                url=self.url,
                status_code=response.status_code,
                response_time=response_time,
                success=True
            )
            return None
        
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            fetch_logger.log_snapshot_fetch(
                url=self.url,
                status_code=response.status_code,
                response_time=response_time,
                success=False,
                error=str(e)
            )
            raise

        try:
            snapshot = Snapshot.model_validate(response.json())
        except ValueError as e:
            fetch_logger.log_snapshot_fetch(
                url=self.url,
                status_code=response.status_code,
                response_time=response_time,
                success=False,
                error=f"Invalid snapshot payload: {e}"
            )
            raise

        fetch_logger.log_snapshot_fetch(
            url=self.url,
            status_code=response.status_code,
            response_time=response_time,
            success=True
        )
        return snapshot
    
    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()
    
    async def __aenter__(self) -> "SnapshotFetcher":
        return self
    
    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
