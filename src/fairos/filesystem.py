# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/filesystem.py

"""
Directory and file operations (/dir/*, /file/*).

Uploads and downloads are multipart forms; file contents pass through
untouched.
"""

import logging
import mimetypes
from pathlib import Path
from typing import BinaryIO, Optional, Union

from fairos.errors import FairOSFileSystemError
from fairos.transport import APIGroup
from fairos.types import (
    BlockSize,
    Compression,
    DirInfo,
    DirListing,
    FileInfo,
    SharedFileInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _uploaded_name(data: dict) -> str:
    # Response: {"Responses": [{"file_name": "...", "message": "..."}]}
    responses = data.get("Responses") or []
    if not responses:
        raise FairOSFileSystemError("Upload response contained no files")
    return responses[0]["file_name"]


class FileSystemAPI(APIGroup):
    """Directory and file endpoints."""

    # -- directories -------------------------------------------------------

    async def mkdir(self, username: str, pod: str, path: str) -> None:
        await self._post(
            "/dir/mkdir", {"pod_name": pod, "dir_path": path}, username,
            error=FairOSFileSystemError,
        )

    async def rmdir(self, username: str, pod: str, path: str) -> None:
        await self._delete(
            "/dir/rmdir", {"pod_name": pod, "dir_path": path}, username,
            error=FairOSFileSystemError,
        )

    async def ls(self, username: str, pod: str, path: str) -> DirListing:
        """List a directory. Returns DirListing with dirs and files."""
        data = await self._get(
            "/dir/ls", {"pod_name": pod, "dir_path": path}, username,
            error=FairOSFileSystemError,
        )
        return DirListing.from_api(data)

    async def dir_exists(self, username: str, pod: str, path: str) -> bool:
        data = await self._get(
            "/dir/present", {"pod_name": pod, "dir_path": path}, username,
            error=FairOSFileSystemError,
        )
        return bool(data.get("present"))

    async def dir_info(self, username: str, pod: str, path: str) -> DirInfo:
        data = await self._get(
            "/dir/stat", {"pod_name": pod, "dir_path": path}, username,
            error=FairOSFileSystemError,
        )
        return DirInfo.from_api(data)

    # -- files -------------------------------------------------------------

    async def _upload_part(
        self,
        username: str,
        pod: str,
        dir: str,
        part: tuple,
        block_size: BlockSize,
        compression: Optional[Compression],
    ) -> str:
        fields = [
            ("pod_name", pod),
            ("dir_path", dir),
            ("block_size", str(block_size)),
            ("files", part),
        ]
        logger.debug(f"upload: pod={pod} dir={dir} file={part[0]} block_size={block_size}")
        data = await self._upload(
            "/file/upload",
            fields,
            username,
            error=FairOSFileSystemError,
            compression=compression.value if compression else None,
        )
        return _uploaded_name(data)

    async def upload_buffer(
        self,
        username: str,
        pod: str,
        dir: str,
        file_name: str,
        data: Union[bytes, BinaryIO],
        content_type: str = DEFAULT_CONTENT_TYPE,
        block_size: BlockSize = BlockSize(1, "M"),
        compression: Optional[Compression] = None,
    ) -> str:
        """
        Upload in-memory bytes (or a binary stream) as a file.

        Args:
            username: Logged-in user
            pod: Pod name
            dir: Destination directory inside the pod
            file_name: Name of the new file
            data: File contents
            content_type: MIME type stored with the file
            block_size: Server-side block size
            compression: Optional gzip/snappy compression

        Returns:
            Name of the uploaded file as reported by the server
        """
        return await self._upload_part(
            username, pod, dir, (file_name, data, content_type), block_size, compression
        )

    async def upload_file(
        self,
        username: str,
        pod: str,
        dir: str,
        local_path: Union[str, Path],
        block_size: BlockSize = BlockSize(1, "M"),
        compression: Optional[Compression] = None,
    ) -> str:
        """Upload a local file, keeping its name. Returns the uploaded name."""
        local_path = Path(local_path)
        content_type = mimetypes.guess_type(local_path.name)[0] or DEFAULT_CONTENT_TYPE
        with open(local_path, "rb") as f:
            return await self._upload_part(
                username, pod, dir, (local_path.name, f, content_type), block_size, compression
            )

    async def download_buffer(self, username: str, pod: str, path: str) -> bytes:
        """Download a file's contents."""
        return await self._download(
            "/file/download",
            [("pod_name", pod), ("file_path", path)],
            username,
            error=FairOSFileSystemError,
        )

    async def download_file(
        self, username: str, pod: str, path: str, local_path: Union[str, Path]
    ) -> None:
        """Download a file and write it to local_path."""
        content = await self.download_buffer(username, pod, path)
        Path(local_path).write_bytes(content)

    async def share_file(self, username: str, pod: str, path: str, receiver: str) -> str:
        """Share a file with another user. Returns the sharing reference."""
        data, _ = await self._post(
            "/file/share",
            {"pod_name": pod, "file_path": path, "dest_user": receiver},
            username,
            error=FairOSFileSystemError,
        )
        return data["file_sharing_reference"]

    async def rm(self, username: str, pod: str, path: str) -> None:
        await self._delete(
            "/file/delete", {"pod_name": pod, "file_path": path}, username,
            error=FairOSFileSystemError,
        )

    async def file_info(self, username: str, pod: str, path: str) -> FileInfo:
        data = await self._get(
            "/file/stat", {"pod_name": pod, "file_path": path}, username,
            error=FairOSFileSystemError,
        )
        return FileInfo.from_api(data)

    async def receive_shared_file(
        self, username: str, pod: str, reference: str, dir: str
    ) -> str:
        """Accept a shared file into dir. Returns the received file name."""
        data = await self._get(
            "/file/receive",
            {"pod_name": pod, "sharing_ref": reference, "dir_path": dir},
            username,
            error=FairOSFileSystemError,
        )
        return data["file_name"]

    async def shared_file_info(
        self, username: str, pod: str, reference: str
    ) -> SharedFileInfo:
        data = await self._get(
            "/file/receiveinfo",
            {"pod_name": pod, "sharing_ref": reference},
            username,
            error=FairOSFileSystemError,
        )
        return SharedFileInfo.from_api(data)
