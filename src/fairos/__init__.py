# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/__init__.py

"""
FairOS Client Library

An asynchronous Python client for the FairOS-dfs HTTP API: user accounts,
pods, files and directories, key-value stores and document databases.

Basic usage:
    from fairos import Client

    async with Client("http://localhost:9090/v1") as fairos:
        await fairos.signup("alice", "secret")
        await fairos.create_pod("alice", "photos", "secret")
        await fairos.upload_file("alice", "photos", "/", "cat.jpg")

For more control:
    from fairos.config import ClientConfig, load_config
    from fairos.types import BlockSize, Compression, Expr
    from fairos.errors import FairOSError
"""

__version__ = "0.1.0"

# Client
from fairos.client import Client
from fairos.mnemonic import generate_mnemonic

# Config
from fairos.config import ClientConfig, load_config

# Types
from fairos.types import (
    BlockSize,
    Compression,
    DirEntry,
    DirInfo,
    DirListing,
    DocumentDatabase,
    Expr,
    FieldType,
    FileBlock,
    FileEntry,
    FileInfo,
    IndexType,
    KeyValueStore,
    PodInfo,
    PodList,
    SharedFileInfo,
    SharedPodInfo,
    SignupResult,
    UserExport,
    UserInfo,
)

# Errors
from fairos.errors import (
    CouldNotConnectError,
    FairOSDocumentError,
    FairOSError,
    FairOSFileSystemError,
    FairOSKeyValueError,
    FairOSPodError,
    FairOSUserError,
    InvalidPasswordError,
    InvalidUsernameError,
    UsernameAlreadyExistsError,
)

__all__ = [
    # Client
    "Client",
    "generate_mnemonic",
    # Config
    "ClientConfig",
    "load_config",
    # Types
    "BlockSize",
    "Compression",
    "DirEntry",
    "DirInfo",
    "DirListing",
    "DocumentDatabase",
    "Expr",
    "FieldType",
    "FileBlock",
    "FileEntry",
    "FileInfo",
    "IndexType",
    "KeyValueStore",
    "PodInfo",
    "PodList",
    "SharedFileInfo",
    "SharedPodInfo",
    "SignupResult",
    "UserExport",
    "UserInfo",
    # Errors
    "CouldNotConnectError",
    "FairOSDocumentError",
    "FairOSError",
    "FairOSFileSystemError",
    "FairOSKeyValueError",
    "FairOSPodError",
    "FairOSUserError",
    "InvalidPasswordError",
    "InvalidUsernameError",
    "UsernameAlreadyExistsError",
]
