# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# src/fairos/doc.py

"""
Document database operations (/doc/*).

Documents are JSON objects. put_document assigns a uuid4 "id" field, which
is how documents are fetched and deleted afterwards. Queries use Expr.
"""

import base64
import json
import uuid
from pathlib import Path
from typing import Any, BinaryIO, Optional, Union

from fairos.errors import FairOSDocumentError
from fairos.transport import APIGroup
from fairos.types import DocumentDatabase, Expr, FieldType


def _decode_doc(encoded: str) -> Any:
    try:
        return json.loads(base64.b64decode(encoded))
    except (ValueError, TypeError) as e:
        raise FairOSDocumentError(f"Could not decode document: {e}") from e


def _build_si(fields) -> str:
    """Simple-index definition: 'name=string,age=number'."""
    return ",".join(f"{name}={FieldType(kind).value}" for name, kind in fields)


class DocumentAPI(APIGroup):
    """Document database endpoints."""

    async def create_doc_database(
        self,
        username: str,
        pod: str,
        name: str,
        fields: list[tuple[str, FieldType]],
        mutable: bool = True,
    ) -> None:
        """
        Create a document database.

        Args:
            fields: Indexed fields as (name, FieldType) pairs
            mutable: Whether documents may be changed after insert
        """
        await self._post(
            "/doc/new",
            {"pod_name": pod, "table_name": name, "si": _build_si(fields), "mutable": mutable},
            username,
            error=FairOSDocumentError,
        )

    async def open_doc_database(self, username: str, pod: str, name: str) -> None:
        await self._post(
            "/doc/open", {"pod_name": pod, "table_name": name}, username,
            error=FairOSDocumentError,
        )

    async def delete_doc_database(self, username: str, pod: str, name: str) -> None:
        await self._delete(
            "/doc/delete", {"pod_name": pod, "table_name": name}, username,
            error=FairOSDocumentError,
        )

    async def list_doc_databases(self, username: str, pod: str) -> list[DocumentDatabase]:
        """List document databases, sorted by name, fields sorted by field name."""
        data = await self._get(
            "/doc/ls", {"pod_name": pod}, username, error=FairOSDocumentError
        )
        databases = [DocumentDatabase.from_api(t) for t in data.get("Tables") or []]
        databases.sort(key=lambda d: d.name)
        return databases

    async def put_document(self, username: str, pod: str, database: str, doc: dict) -> str:
        """Insert a document. Returns the generated id."""
        doc_id = str(uuid.uuid4())
        doc = {**doc, "id": doc_id}
        await self._post(
            "/doc/entry/put",
            {"pod_name": pod, "table_name": database, "doc": json.dumps(doc)},
            username,
            error=FairOSDocumentError,
        )
        return doc_id

    async def get_document(self, username: str, pod: str, database: str, id: str) -> Any:
        data = await self._get(
            "/doc/entry/get",
            {"pod_name": pod, "table_name": database, "id": id},
            username,
            error=FairOSDocumentError,
        )
        return _decode_doc(data.get("doc", ""))

    async def find_documents(
        self,
        username: str,
        pod: str,
        database: str,
        expr: Expr,
        limit: Optional[int] = None,
    ) -> list:
        """Return the documents matching expr, at most limit of them."""
        params = {"pod_name": pod, "table_name": database, "expr": str(expr)}
        if limit is not None:
            params["limit"] = str(limit)
        data = await self._get("/doc/find", params, username, error=FairOSDocumentError)
        return [_decode_doc(d) for d in data.get("docs") or []]

    async def delete_document(self, username: str, pod: str, database: str, id: str) -> None:
        await self._delete(
            "/doc/entry/del",
            {"pod_name": pod, "table_name": database, "id": id},
            username,
            error=FairOSDocumentError,
        )

    async def count_documents(
        self, username: str, pod: str, database: str, expr: Expr = None
    ) -> int:
        """Count documents matching expr (all documents by default)."""
        expr = expr or Expr.all()
        data, _ = await self._post(
            "/doc/count",
            {"pod_name": pod, "table_name": database, "expr": str(expr)},
            username,
            error=FairOSDocumentError,
        )
        # the count comes back in the message field
        try:
            return int(data["message"])
        except (KeyError, ValueError) as e:
            raise FairOSDocumentError(f"Unexpected count response: {data}") from e

    async def load_json_buffer(
        self, username: str, pod: str, database: str, data: Union[bytes, str, BinaryIO]
    ) -> None:
        """Bulk load documents from a JSON buffer."""
        await self._upload(
            "/doc/loadjson",
            [
                ("pod_name", pod),
                ("table_name", database),
                ("json", ("data.json", data, "application/json")),
            ],
            username,
            error=FairOSDocumentError,
        )

    async def load_json_file(
        self, username: str, pod: str, database: str, local_path: Union[str, Path]
    ) -> None:
        local_path = Path(local_path)
        with open(local_path, "rb") as f:
            await self._upload(
                "/doc/loadjson",
                [
                    ("pod_name", pod),
                    ("table_name", database),
                    ("json", (local_path.name, f, "application/json")),
                ],
                username,
                error=FairOSDocumentError,
            )

    async def index_json(self, username: str, pod: str, database: str, file: str) -> None:
        """Index a JSON file already stored in the pod into the database."""
        await self._post(
            "/doc/indexjson",
            {"pod_name": pod, "table_name": database, "file_name": file},
            username,
            error=FairOSDocumentError,
        )
