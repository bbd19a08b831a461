# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/pod.py

"""Pod operations (/pod/*)."""

from fairos.errors import FairOSPodError
from fairos.transport import APIGroup
from fairos.types import PodInfo, PodList, SharedPodInfo


class PodAPI(APIGroup):
    """Pod endpoints. A pod is a user-owned storage namespace."""

    async def create_pod(self, username: str, name: str, password: str) -> None:
        await self._post(
            "/pod/new", {"pod_name": name, "password": password}, username,
            error=FairOSPodError,
        )

    async def open_pod(self, username: str, name: str, password: str) -> None:
        await self._post(
            "/pod/open", {"pod_name": name, "password": password}, username,
            error=FairOSPodError,
        )

    async def sync_pod(self, username: str, name: str) -> None:
        await self._post("/pod/sync", {"pod_name": name}, username, error=FairOSPodError)

    async def close_pod(self, username: str, name: str) -> None:
        await self._post("/pod/close", {"pod_name": name}, username, error=FairOSPodError)

    async def share_pod(self, username: str, name: str, password: str) -> str:
        """Share a pod. Returns the sharing reference for the receiver."""
        data, _ = await self._post(
            "/pod/share", {"pod_name": name, "password": password}, username,
            error=FairOSPodError,
        )
        return data["pod_sharing_reference"]

    async def delete_pod(self, username: str, name: str, password: str) -> None:
        await self._delete(
            "/pod/delete", {"pod_name": name, "password": password}, username,
            error=FairOSPodError,
        )

    async def pod_exists(self, username: str, name: str) -> bool:
        data = await self._get(
            "/pod/present", {"pod_name": name}, username, error=FairOSPodError
        )
        return bool(data.get("present"))

    async def list_pods(self, username: str) -> PodList:
        data = await self._get("/pod/ls", username=username, error=FairOSPodError)
        return PodList.from_api(data)

    async def pod_info(self, username: str, name: str) -> PodInfo:
        data = await self._get(
            "/pod/stat", {"pod_name": name}, username, error=FairOSPodError
        )
        return PodInfo.from_api(data)

    async def receive_shared_pod(self, username: str, reference: str) -> None:
        await self._get(
            "/pod/receive", {"sharing_ref": reference}, username, error=FairOSPodError
        )

    async def shared_pod_info(self, username: str, reference: str) -> SharedPodInfo:
        data = await self._get(
            "/pod/receiveinfo", {"sharing_ref": reference}, username, error=FairOSPodError
        )
        return SharedPodInfo.from_api(data)
