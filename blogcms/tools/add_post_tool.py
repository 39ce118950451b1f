"""
Envelope wrapper around add_post for scripts and HTTP handlers
"""
import logging
import uuid
from time import perf_counter
from typing import Any, Dict, Mapping
from blogcms.functions.add_post import add_post, POSTS_CONTAINER
from blogcms.shared.cosmos_client import CosmosDBClient
from blogcms.specs.common.errors import BlogCmsError
from blogcms.specs.models.tools import AddPostResponse, AddPostResult, ErrorInfo


def add_post_tool(client: CosmosDBClient, payload: Mapping[str, Any], overwrite: bool = True) -> Dict[str, Any]:
    """
    Adds a post and reports the outcome as a standardized envelope.

    Args:
        client: Cosmos client the post is written through
        payload: Post fields (title, slug, image, description, contentUnits, ...)
        overwrite: Replace an existing post with the same slug (default) or fail

    Returns:
        Dict with status "completed" and the slug, or "failed" and the error
    """
    run_trace_id = uuid.uuid4().hex
    start = perf_counter()
    meta = {"runTraceId": run_trace_id, "container": POSTS_CONTAINER, "overwrite": overwrite}

    try:
        slug = add_post(client, payload, overwrite=overwrite, run_trace_id=run_trace_id)
        response = AddPostResponse(status="completed", result=AddPostResult(slug=slug))
    except BlogCmsError as e:
        logging.getLogger("blogcms").error(f"{e.code}: {str(e)}")
        response = AddPostResponse(status="failed", error=ErrorInfo(**e.to_dict()))
    except Exception as e:
        slug = payload.get("slug") if isinstance(payload, Mapping) else None
        logging.getLogger("blogcms").exception(f"Failed to add post - slug: {slug}")
        response = AddPostResponse(
            status="failed",
            error=ErrorInfo(code="POST_CREATION_ERROR", message=str(e)),
        )

    meta["durationMs"] = int((perf_counter() - start) * 1000)
    response.meta = meta
    return response.model_dump(mode="json")
