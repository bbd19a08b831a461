# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/types.py

"""
FairOS Type Definitions

Dataclasses for request options and return types. The server encodes most
numbers as strings; the from_api constructors convert them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


def _empty_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


# =============================================================================
# User
# =============================================================================

@dataclass
class SignupResult:
    """Result of a signup: the account address and the mnemonic if generated."""
    address: str
    mnemonic: Optional[str] = None


@dataclass
class UserExport:
    username: str
    address: str

    @classmethod
    def from_api(cls, data: dict) -> "UserExport":
        return cls(username=data["user_name"], address=data["address"])


@dataclass
class UserInfo:
    username: str
    address: str

    @classmethod
    def from_api(cls, data: dict) -> "UserInfo":
        return cls(username=data["user_name"], address=data["address"])


# =============================================================================
# Pod
# =============================================================================

@dataclass
class PodList:
    """Pods owned by the user and pods shared with them."""
    pods: list[str] = field(default_factory=list)
    shared_pods: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "PodList":
        # null lists come back for users without pods
        return cls(
            pods=data.get("pod_name") or [],
            shared_pods=data.get("shared_pod_name") or [],
        )


@dataclass
class PodInfo:
    name: str
    address: str

    @classmethod
    def from_api(cls, data: dict) -> "PodInfo":
        return cls(name=data["pod_name"], address=data["address"])


@dataclass
class SharedPodInfo:
    name: str
    address: str
    username: str
    user_address: str
    shared_time: str

    @classmethod
    def from_api(cls, data: dict) -> "SharedPodInfo":
        return cls(
            name=data["pod_name"],
            address=data["pod_address"],
            username=data["user_name"],
            user_address=data["user_address"],
            shared_time=data["shared_time"],
        )


# =============================================================================
# Filesystem
# =============================================================================

class Compression(str, Enum):
    GZIP = "gzip"
    SNAPPY = "snappy"

    @classmethod
    def from_api(cls, value: str) -> Optional["Compression"]:
        """Parse the server's compression field; empty string means none."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown compression: {value!r}") from None


# Multipliers are decimal, as the server uses them
BLOCK_UNITS = {
    "B": 1,
    "K": 1_000,
    "M": 1_000_000,
    "G": 1_000_000_000,
    "T": 1_000_000_000_000,
}


@dataclass(frozen=True)
class BlockSize:
    """A block size such as 1K or 10M. Units: B, K, M, G, T (powers of 1000)."""
    value: int
    unit: str = "B"

    def __post_init__(self):
        if self.unit not in BLOCK_UNITS:
            raise ValueError(f"Unknown block size unit: {self.unit!r}")
        if self.value <= 0:
            raise ValueError(f"Block size must be positive: {self.value}{self.unit}")

    def __str__(self) -> str:
        return f"{self.value}{self.unit}"

    @property
    def bytes(self) -> int:
        return self.value * BLOCK_UNITS[self.unit]

    def to_unit(self, unit: str) -> "BlockSize":
        """Convert to another unit, truncating remainders. Less than one whole unit is a ValueError."""
        if unit not in BLOCK_UNITS:
            raise ValueError(f"Unknown block size unit: {unit!r}")
        return BlockSize(self.bytes // BLOCK_UNITS[unit], unit)

    def to_bytes(self) -> "BlockSize":
        return self.to_unit("B")

    def to_kilobytes(self) -> "BlockSize":
        return self.to_unit("K")

    def to_megabytes(self) -> "BlockSize":
        return self.to_unit("M")

    def to_gigabytes(self) -> "BlockSize":
        return self.to_unit("G")

    def to_terabytes(self) -> "BlockSize":
        return self.to_unit("T")

    @classmethod
    def parse(cls, text: str) -> "BlockSize":
        """Parse '<n><unit>', e.g. '512K'."""
        text = text.strip()
        if len(text) < 2:
            raise ValueError(f"Invalid block size: {text!r}")
        unit = text[-1].upper()
        if unit not in BLOCK_UNITS:
            raise ValueError(f"Invalid block size unit in {text!r}")
        try:
            value = int(text[:-1])
        except ValueError:
            raise ValueError(f"Invalid block size: {text!r}") from None
        return cls(value, unit)

    @classmethod
    def from_bytes(cls, n: int) -> "BlockSize":
        """Express a byte count in the largest unit it reaches."""
        for unit in ("T", "G", "M", "K"):
            if n >= BLOCK_UNITS[unit]:
                return cls(n // BLOCK_UNITS[unit], unit)
        return cls(n, "B")


@dataclass
class DirEntry:
    name: str
    content_type: str
    creation_time: int
    modification_time: int
    access_time: int

    @classmethod
    def from_api(cls, data: dict) -> "DirEntry":
        return cls(
            name=data["name"],
            content_type=data.get("content_type", ""),
            creation_time=int(data["creation_time"]),
            modification_time=int(data["modification_time"]),
            access_time=int(data["access_time"]),
        )


@dataclass
class FileEntry:
    name: str
    content_type: str
    size: int
    block_size: BlockSize
    creation_time: int
    modification_time: int
    access_time: int

    @classmethod
    def from_api(cls, data: dict) -> "FileEntry":
        return cls(
            name=data["name"],
            content_type=data.get("content_type", ""),
            size=int(data["size"]),
            block_size=BlockSize.from_bytes(int(data["block_size"])),
            creation_time=int(data["creation_time"]),
            modification_time=int(data["modification_time"]),
            access_time=int(data["access_time"]),
        )


@dataclass
class DirListing:
    """Contents of a directory."""
    dirs: list[DirEntry] = field(default_factory=list)
    files: list[FileEntry] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "DirListing":
        return cls(
            dirs=[DirEntry.from_api(d) for d in data.get("dirs") or []],
            files=[FileEntry.from_api(f) for f in data.get("files") or []],
        )


@dataclass
class DirInfo:
    pod: str
    path: str
    name: str
    creation_time: int
    modification_time: int
    access_time: int
    no_of_dirs: int
    no_of_files: int

    @classmethod
    def from_api(cls, data: dict) -> "DirInfo":
        return cls(
            pod=data["pod_name"],
            path=data["dir_path"],
            name=data["dir_name"],
            creation_time=int(data["creation_time"]),
            modification_time=int(data["modification_time"]),
            access_time=int(data["access_time"]),
            no_of_dirs=int(data["no_of_directories"]),
            no_of_files=int(data["no_of_files"]),
        )


@dataclass
class FileBlock:
    name: str
    reference: str
    size: int
    compressed_size: int

    @classmethod
    def from_api(cls, data: dict) -> "FileBlock":
        return cls(
            name=data["name"],
            reference=data["reference"],
            size=int(data["size"]),
            compressed_size=int(data["compressed_size"]),
        )


@dataclass
class FileInfo:
    pod: str
    path: str
    name: str
    content_type: Optional[str]
    size: int
    block_size: BlockSize
    compression: Optional[Compression]
    creation_time: int
    modification_time: int
    access_time: int
    blocks: list[FileBlock] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "FileInfo":
        return cls(
            pod=data["pod_name"],
            path=data["file_path"],
            name=data["file_name"],
            content_type=_empty_to_none(data.get("content_type")),
            size=int(data["file_size"]),
            block_size=BlockSize.from_bytes(int(data["block_size"])),
            compression=Compression.from_api(data.get("compression", "")),
            creation_time=int(data["creation_time"]),
            modification_time=int(data["modification_time"]),
            access_time=int(data["access_time"]),
            blocks=[FileBlock.from_api(b) for b in data.get("Blocks") or []],
        )


@dataclass
class SharedFileInfo:
    pod: str
    name: str
    content_type: Optional[str]
    size: int
    block_size: BlockSize
    no_of_blocks: int
    compression: Optional[Compression]
    sender: str
    receiver: str
    shared_time: int

    @classmethod
    def from_api(cls, data: dict) -> "SharedFileInfo":
        return cls(
            pod=data["pod_name"],
            name=data["name"],
            content_type=_empty_to_none(data.get("content_type")),
            size=int(data["size"]),
            block_size=BlockSize.from_bytes(int(data["block_size"])),
            no_of_blocks=int(data["number_of_blocks"]),
            compression=Compression.from_api(data.get("compression", "")),
            sender=data["source_address"],
            receiver=data["dest_address"],
            shared_time=int(data["shared_time"]),
        )


# =============================================================================
# Key-value
# =============================================================================

class IndexType(str, Enum):
    STRING = "string"
    NUMBER = "number"


@dataclass
class KeyValueStore:
    name: str
    indexes: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "KeyValueStore":
        return cls(name=data["table_name"], indexes=list(data.get("indexes") or []))


# =============================================================================
# Documents
# =============================================================================

class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    MAP = "map"

    @classmethod
    def from_code(cls, code: int) -> "FieldType":
        """Map the numeric index type used in /doc/ls listings."""
        try:
            return _FIELD_TYPE_CODES[code]
        except KeyError:
            raise ValueError(f"Unknown field type code: {code}") from None


_FIELD_TYPE_CODES = {
    2: FieldType.STRING,
    3: FieldType.NUMBER,
    4: FieldType.MAP,
}


@dataclass
class DocumentDatabase:
    name: str
    fields: list[tuple[str, FieldType]] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "DocumentDatabase":
        fields = [
            (prop["name"], FieldType.from_code(prop["type"]))
            for prop in data.get("indexes") or []
        ]
        fields.sort(key=lambda f: f[0])
        return cls(name=data["table_name"], fields=fields)


ExprValue = Union[str, int]


@dataclass(frozen=True)
class Expr:
    """
    A document query expression.

    Build with the constructors: Expr.all(), Expr.eq("n", 3), Expr.gt(...),
    Expr.gte(...), Expr.lt(...), Expr.lte(...). String values are quoted
    when rendered; str(expr) gives the server's query syntax.
    """
    op: str
    field: Optional[str] = None
    value: Optional[ExprValue] = None

    @classmethod
    def all(cls) -> "Expr":
        return cls("all")

    @classmethod
    def eq(cls, field: str, value: ExprValue) -> "Expr":
        return cls("eq", field, value)

    @classmethod
    def gt(cls, field: str, value: ExprValue) -> "Expr":
        return cls("gt", field, value)

    @classmethod
    def gte(cls, field: str, value: ExprValue) -> "Expr":
        return cls("gte", field, value)

    @classmethod
    def lt(cls, field: str, value: ExprValue) -> "Expr":
        return cls("lt", field, value)

    @classmethod
    def lte(cls, field: str, value: ExprValue) -> "Expr":
        return cls("lte", field, value)

    @staticmethod
    def _render_value(value: ExprValue) -> str:
        if isinstance(value, bool):
            raise TypeError("boolean values are not supported in expressions")
        if isinstance(value, str):
            return f'"{value}"'
        if isinstance(value, int):
            return str(value)
        raise TypeError(f"unsupported expression value: {value!r}")

    def __str__(self) -> str:
        if self.op == "all":
            return ""
        value = self._render_value(self.value)
        if self.op == "eq":
            return f"{self.field}={value}"
        if self.op == "gt":
            return f"{self.field}>{value}"
        if self.op == "gte":
            return f"{self.field}>={value}"
        # less-than is written with the operands swapped
        if self.op == "lt":
            return f"{value}>{self.field}"
        if self.op == "lte":
            return f"{value}>={self.field}"
        raise ValueError(f"Unknown expression operator: {self.op!r}")
