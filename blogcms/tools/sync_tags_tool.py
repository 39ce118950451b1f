"""
Envelope wrapper around sync_tags, shared by the scripts, timers and HTTP route
"""
import logging
import uuid
from time import perf_counter
from typing import Any, Dict, Optional
from blogcms.functions.sync_tags import sync_tags, DEFAULT_MAX_ATTEMPTS
from blogcms.shared.cosmos_client import CosmosDBClient
from blogcms.specs.common.errors import BlogCmsError
from blogcms.specs.models.tools import ErrorInfo, TagSyncResponse
from blogcms.specs.tag_kinds import TagKind


def sync_tags_tool(
    client: CosmosDBClient,
    kind: TagKind,
    page_size: Optional[int] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Dict[str, Any]:
    """
    Rebuilds one tag aggregate and reports the outcome as a standardized envelope.

    Status is "skipped" when there are no posts, "completed" after a write and
    "failed" when the scan or the write failed.
    """
    run_trace_id = uuid.uuid4().hex
    start = perf_counter()
    meta = {
        "runTraceId": run_trace_id,
        "kind": kind.name,
        "document": f"/{kind.container}/{kind.document_id}",
    }

    try:
        result = sync_tags(
            client,
            kind,
            page_size=page_size,
            max_attempts=max_attempts,
            run_trace_id=run_trace_id,
        )
        response = TagSyncResponse(status=result.status, result=result)
    except BlogCmsError as e:
        logging.getLogger("blogcms").error(f"{e.code}: {str(e)}")
        response = TagSyncResponse(status="failed", error=ErrorInfo(**e.to_dict()))
    except Exception as e:
        logging.getLogger("blogcms").exception(f"Failed to sync {kind.name}")
        response = TagSyncResponse(
            status="failed",
            error=ErrorInfo(code="TAG_SYNC_ERROR", message=str(e)),
        )

    meta["durationMs"] = int((perf_counter() - start) * 1000)
    response.meta = meta
    return response.model_dump(mode="json")
