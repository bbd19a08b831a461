# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/client.py

"""
FairOS client.

One object exposing every API group over a single transport:

    async with Client() as fairos:
        await fairos.login("alice", "secret")
        listing = await fairos.ls("alice", "photos", "/")
"""

import httpx

from fairos.config import ClientConfig
from fairos.doc import DocumentAPI
from fairos.filesystem import FileSystemAPI
from fairos.kv import KeyValueAPI
from fairos.pod import PodAPI
from fairos.transport import Transport
from fairos.user import UserAPI


class Client(UserAPI, PodAPI, FileSystemAPI, KeyValueAPI, DocumentAPI):
    """Async client for the FairOS-dfs HTTP API."""

    def __init__(
        self,
        url: str = None,
        config: ClientConfig = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        """
        Initialize the client.

        Args:
            url: Server URL, overrides config.url (default http://localhost:9090/v1)
            config: ClientConfig with timeouts and pool settings
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
        """
        config = config or ClientConfig()
        self.config = config
        self.transport = Transport(
            url=url or config.url,
            timeout=config.timeout,
            pool_idle_timeout=config.pool_idle_timeout,
            max_idle_per_host=config.max_idle_per_host,
            transport=transport,
        )

    @property
    def url(self) -> str:
        return self.transport.base_url

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
