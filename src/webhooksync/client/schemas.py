"""Pydantic schemas for documents served by the webhook."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator


class DocumentsResponse(BaseModel):
    """Body returned by a GET on the webhook.

    Documents are kept as raw dictionaries so that one malformed entry
    does not reject the whole response.
    """

    documents: list[dict[str, Any]]


class RemoteDocument(BaseModel):
    """A document to write into the vault."""

    filename: str
    content: str
    path: str | None = None

    @field_validator("filename")
    @classmethod
    def filename_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Document missing filename")
        return value

    @property
    def vault_path(self) -> str:
        """Target path: ``path/filename`` with a ``.md`` extension."""
        file_path = self.filename
        if self.path:
            file_path = f"{self.path.strip('/')}/{self.filename}"
        if not file_path.endswith(".md"):
            file_path += ".md"
        return file_path
