from __future__ import annotations

from typing import Dict, Type

from pydantic import BaseModel

from ..documents.post_document_spec import ContentUnit, PostInput, PostDocument
from ..documents.tag_document_spec import TagAggregateDocument
from .tools import (
    ErrorInfo,
    ToolResultEnvelope,
    AddPostResult,
    AddPostResponse,
    TagSyncResult,
    TagSyncResponse,
)


# Registry mapping output schema filenames to models for generation
SCHEMA_MODELS: Dict[str, Type[BaseModel]] = {
    "post.input.schema.json": PostInput,
    "post.document.schema.json": PostDocument,
    "content.unit.schema.json": ContentUnit,
    "tag.aggregate.document.schema.json": TagAggregateDocument,
    "tool.envelope.schema.json": ToolResultEnvelope,
    "error.info.schema.json": ErrorInfo,
    "add_post.response.schema.json": AddPostResponse,
    "tag_sync.result.schema.json": TagSyncResult,
    "tag_sync.response.schema.json": TagSyncResponse,
}

__all__ = [
    "ContentUnit",
    "PostInput",
    "PostDocument",
    "TagAggregateDocument",
    "ErrorInfo",
    "ToolResultEnvelope",
    "AddPostResult",
    "AddPostResponse",
    "TagSyncResult",
    "TagSyncResponse",
    "SCHEMA_MODELS",
]
