"""Fetches a schema from a live GraphQL endpoint with the introspection query.

Handles HTTP communication, error handling, and response decoding.
"""

import logging
from typing import Any

import httpx
from graphql import get_introspection_query

from .auth import Auth, NoAuth
from .errors import IntrospectionError
from .ir import IRSchema
from .parser import schema_from_introspection

logger = logging.getLogger(__name__)


class IntrospectionClient:
    """Runs the standard introspection query against an endpoint.

    Supports pluggable authentication via the Auth protocol.

    Examples:
        async with IntrospectionClient(url, auth=BearerAuth(token)) as client:
            schema = await client.fetch_schema()

        # Tests can swap the network for an in-process transport
        client = IntrospectionClient(url, transport=httpx.MockTransport(handler))
    """

    def __init__(
        self,
        url: str,
        auth: Auth | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            url: GraphQL endpoint URL
            auth: Authentication handler (implements Auth protocol)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used instead of the network
        """
        self.url = url
        self.timeout = timeout
        self._auth = auth or NoAuth()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "IntrospectionClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            headers.update(self._auth.get_headers())

            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self) -> dict[str, Any]:
        """Post the introspection query and return the decoded response.

        Raises:
            IntrospectionError: If the response contains errors
            httpx.HTTPStatusError: If the endpoint answers with an error status
        """
        client = await self._get_client()
        logger.info("Fetching introspection schema from %s", self.url)

        response = await client.post(self.url, json={"query": get_introspection_query(descriptions=True)})
        response.raise_for_status()

        result = response.json()

        if result.get("errors"):
            error_messages = "; ".join(e.get("message", str(e)) for e in result["errors"])
            raise IntrospectionError(f"Introspection failed: {error_messages}", result["errors"])

        return result

    async def fetch_schema(self) -> IRSchema:
        """Fetch the schema and decode it into the IR."""
        return schema_from_introspection(await self.fetch())
