# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/kv.py

"""
Key-value store operations (/kv/*).

Values are JSON-encoded before they are stored, and decoded again on
read. CSV loads go through the multipart /kv/loadcsv endpoint.
"""

import base64
import json
import logging
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

from fairos.errors import FairOSKeyValueError
from fairos.transport import APIGroup, FairOSAPIError
from fairos.types import IndexType, KeyValueStore

logger = logging.getLogger(__name__)


def _decode_value(encoded: str) -> Any:
    """Values fetched with format=byte-string are base64 of the stored JSON."""
    try:
        return json.loads(base64.b64decode(encoded))
    except (ValueError, TypeError) as e:
        raise FairOSKeyValueError(f"Could not decode stored value: {e}") from e


class KeyValueSeek:
    """
    Async iterator over a seek started with KeyValueAPI.kv_seek.

    Each step calls GET /kv/seek/next and yields (key, value) where value is
    the raw stored string. Iteration ends at the first error response, when
    the server returns no key, or after `limit` items.
    """

    def __init__(self, api: "KeyValueAPI", username: str, pod: str, store: str,
                 limit: Optional[int] = None):
        self.api = api
        self.username = username
        self.pod = pod
        self.store = store
        self.limit = limit
        self.count = 0

    def __aiter__(self) -> "KeyValueSeek":
        return self

    async def __anext__(self) -> tuple[str, str]:
        if self.limit is not None and self.count >= self.limit:
            raise StopAsyncIteration
        try:
            data = await self.api.transport.get(
                "/kv/seek/next",
                {"pod_name": self.pod, "table_name": self.store},
                self.api._cookie(self.username),
            )
        except FairOSAPIError as e:
            # the server answers with an error once the cursor is exhausted
            logger.debug(f"seek ended: {e}")
            raise StopAsyncIteration
        keys = data.get("keys") or []
        if not keys:
            raise StopAsyncIteration
        self.count += 1
        return keys[0], data.get("values", "")


class KeyValueAPI(APIGroup):
    """Key-value store endpoints."""

    async def create_kv_store(
        self, username: str, pod: str, name: str, index_type: IndexType = IndexType.STRING
    ) -> None:
        await self._post(
            "/kv/new",
            {"pod_name": pod, "table_name": name, "indexType": IndexType(index_type).value},
            username,
            error=FairOSKeyValueError,
        )

    async def open_kv_store(self, username: str, pod: str, name: str) -> None:
        await self._post(
            "/kv/open", {"pod_name": pod, "table_name": name}, username,
            error=FairOSKeyValueError,
        )

    async def delete_kv_store(self, username: str, pod: str, name: str) -> None:
        await self._delete(
            "/kv/delete", {"pod_name": pod, "table_name": name}, username,
            error=FairOSKeyValueError,
        )

    async def list_kv_stores(self, username: str, pod: str) -> list[KeyValueStore]:
        """List the pod's key-value stores, sorted by name."""
        data = await self._get(
            "/kv/ls", {"pod_name": pod}, username, error=FairOSKeyValueError
        )
        stores = [KeyValueStore.from_api(t) for t in data.get("Tables") or []]
        stores.sort(key=lambda s: s.name)
        return stores

    async def put_kv_pair(
        self, username: str, pod: str, store: str, key: str, value: Any
    ) -> None:
        """Store any JSON-serializable value under key."""
        await self._post(
            "/kv/entry/put",
            {"pod_name": pod, "table_name": store, "key": key, "value": json.dumps(value)},
            username,
            error=FairOSKeyValueError,
        )

    async def get_kv_pair(self, username: str, pod: str, store: str, key: str) -> Any:
        """Fetch and JSON-decode the value stored under key."""
        data = await self._get(
            "/kv/entry/get",
            {"pod_name": pod, "table_name": store, "key": key, "format": "byte-string"},
            username,
            error=FairOSKeyValueError,
        )
        return _decode_value(data.get("values", ""))

    async def delete_kv_pair(self, username: str, pod: str, store: str, key: str) -> None:
        await self._delete(
            "/kv/entry/del",
            {"pod_name": pod, "table_name": store, "key": key},
            username,
            error=FairOSKeyValueError,
        )

    async def count_kv_pairs(self, username: str, pod: str, store: str) -> int:
        data, _ = await self._post(
            "/kv/count", {"pod_name": pod, "table_name": store}, username,
            error=FairOSKeyValueError,
        )
        return int(data["count"])

    async def kv_pair_exists(self, username: str, pod: str, store: str, key: str) -> bool:
        data = await self._get(
            "/kv/present",
            {"pod_name": pod, "table_name": store, "key": key},
            username,
            error=FairOSKeyValueError,
        )
        return bool(data.get("present"))

    async def _load_csv(
        self, username: str, pod: str, store: str, part: tuple, memory: bool
    ) -> None:
        fields = [("pod_name", pod), ("table_name", store)]
        if memory:
            fields.append(("memory", "true"))
        fields.append(("csv", part))
        await self._upload("/kv/loadcsv", fields, username, error=FairOSKeyValueError)

    async def load_csv_buffer(
        self,
        username: str,
        pod: str,
        store: str,
        data: Union[bytes, str, BinaryIO],
        memory: bool = False,
    ) -> None:
        """Bulk load CSV rows (header row first) into a store."""
        await self._load_csv(username, pod, store, ("data.csv", data, "text/csv"), memory)

    async def load_csv_file(
        self,
        username: str,
        pod: str,
        store: str,
        local_path: Union[str, Path],
        memory: bool = False,
    ) -> None:
        local_path = Path(local_path)
        with open(local_path, "rb") as f:
            await self._load_csv(
                username, pod, store, (local_path.name, f, "text/csv"), memory
            )

    async def kv_seek(
        self,
        username: str,
        pod: str,
        store: str,
        start_key: str,
        end_key: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> KeyValueSeek:
        """
        Start a range scan and return an async iterator over its entries.

        Example:
            seek = await fairos.kv_seek("alice", "pod", "store", "a", "m", limit=10)
            async for key, value in seek:
                ...
        """
        await self._post(
            "/kv/seek",
            {
                "pod_name": pod,
                "table_name": store,
                "start_prefix": start_key,
                "end_prefix": end_key,
                "limit": limit,
            },
            username,
            error=FairOSKeyValueError,
        )
        return KeyValueSeek(self, username, pod, store, limit)
