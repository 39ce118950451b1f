from typing import Any, Callable, Mapping, Optional, Union

from azure.core.exceptions import AzureError
from azure.cosmos import exceptions
from pydantic import ValidationError

from blogcms.shared.cosmos_client import CosmosDBClient
from blogcms.shared.logging_utils import info as log_info, error as log_error
from blogcms.specs.common.datetime_utils import utc_now
from blogcms.specs.common.errors import InvalidPostError, PostAlreadyExistsError, PostWriteError
from blogcms.specs.documents.post_document_spec import PostDocument, PostInput

POSTS_CONTAINER = "posts"


def build_post_document(post: PostInput, timestamp: str) -> PostDocument:
    """Stamp the system fields on a new post. Both timestamps share one instant."""
    fields = post.model_dump(by_alias=True)
    # system fields always win over same-named payload extras
    fields.update(id=post.slug, views=0, createdAt=timestamp, updatedAt=timestamp)
    return PostDocument.model_validate(fields)


def add_post(
    client: CosmosDBClient,
    payload: Union[PostInput, Mapping[str, Any]],
    *,
    overwrite: bool = True,
    now: Callable[[], str] = utc_now,
    run_trace_id: Optional[str] = None,
) -> str:
    """
    Write a post to the posts container, keyed by its slug.

    With ``overwrite`` (the default) an existing post with the same slug is
    replaced wholesale; nothing of the old document survives. With
    ``overwrite=False`` the write is create-only.

    Returns:
        The slug, which is also the document id

    Raises:
        InvalidPostError: payload does not match PostInput
        PostAlreadyExistsError: create-only write hit an existing slug
        PostWriteError: any other store failure
    """
    try:
        post = payload if isinstance(payload, PostInput) else PostInput.model_validate(payload)
    except ValidationError as exc:
        log_error(run_trace_id, "post:invalid_payload", error=str(exc))
        raise InvalidPostError("Invalid post payload", details={"errors": exc.errors(include_url=False, include_context=False)}) from exc

    body = build_post_document(post, now()).model_dump(mode="json", by_alias=True, exclude_none=True)
    try:
        if overwrite:
            client.upsert_item(POSTS_CONTAINER, body)
        else:
            client.create_item(POSTS_CONTAINER, body)
    except exceptions.CosmosResourceExistsError as exc:
        log_error(run_trace_id, "post:already_exists", slug=post.slug)
        raise PostAlreadyExistsError(post.slug) from exc
    except AzureError as exc:
        status = getattr(exc, "status_code", None)
        log_error(run_trace_id, "post:create_failed", slug=post.slug, status=status, error=str(exc))
        raise PostWriteError(post.slug, f"Error adding post '{post.slug}': {exc.message}", details={"status": status}) from exc

    log_info(run_trace_id, "post:created", slug=post.slug, overwrite=overwrite)
    return post.slug
