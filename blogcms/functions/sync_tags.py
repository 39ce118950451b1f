"""
Rebuild a tag aggregate document (categories or labels) from every post.

The aggregate is recomputed from scratch on each run: the tag list read from
the posts replaces whatever list the aggregate held before. The write is a
merge guarded by the document's ETag, so a concurrent writer is detected and
the read-and-write step is retried instead of silently overwritten.
"""
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import backoff
from azure.core.exceptions import AzureError
from azure.cosmos import exceptions

from blogcms.shared.cosmos_client import CosmosDBClient, strip_system_properties
from blogcms.shared.logging_utils import info as log_info, warning as log_warning, error as log_error
from blogcms.specs.common.datetime_utils import utc_now
from blogcms.specs.common.errors import AggregateConflictError, TagSyncError
from blogcms.specs.documents.tag_document_spec import TagAggregateDocument
from blogcms.specs.models.tools import TagSyncResult
from blogcms.specs.tag_kinds import TagKind

POSTS_CONTAINER = "posts"

CONFLICT_BACKOFF_FACTOR = 0.1  # 100ms
CONFLICT_BACKOFF_MAX = 2.0      # 2s
DEFAULT_MAX_ATTEMPTS = 5


def collect_unique_tags(posts: Iterable[Dict[str, Any]], field: str) -> Tuple[List[str], int]:
    """
    Gather the trimmed values of ``field`` across posts, first-seen order.

    Matching is case-sensitive: "Tech" and "tech" stay distinct while
    "Tech " and "Tech" collapse. Posts without the field, or where it is
    not a list, are skipped, as are non-string entries.

    Returns:
        (unique tags, number of posts scanned)
    """
    unique: Dict[str, None] = {}
    scanned = 0
    for post in posts:
        scanned += 1
        values = post.get(field)
        if not isinstance(values, list):
            continue
        for value in values:
            if isinstance(value, str):
                unique.setdefault(value.strip(), None)
    return list(unique), scanned


def _write_aggregate(
    client: CosmosDBClient,
    kind: TagKind,
    tags: List[str],
    timestamp: str,
) -> Tuple[Dict[str, Any], bool]:
    existing = client.read_item(kind.container, kind.document_id)
    try:
        if existing is None:
            doc = TagAggregateDocument(id=kind.document_id, tags=tags, createdAt=timestamp, updatedAt=timestamp)
            body = doc.model_dump(exclude_none=True)
            client.create_item(kind.container, body)
            return body, True

        # Merge: every stored field carries over as-is, only tags and updatedAt are written
        body = strip_system_properties(existing)
        body.update({"tags": tags, "updatedAt": timestamp})
        client.replace_item(kind.container, body, etag=existing.get("_etag"))
        return body, False
    except (exceptions.CosmosAccessConditionFailedError, exceptions.CosmosResourceExistsError) as exc:
        raise AggregateConflictError(kind.name, kind.document_id, details={"status": exc.status_code}) from exc


def sync_tags(
    client: CosmosDBClient,
    kind: TagKind,
    *,
    page_size: Optional[int] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    now: Callable[[], str] = utc_now,
    run_trace_id: Optional[str] = None,
) -> TagSyncResult:
    """
    Recompute the aggregate for ``kind`` and persist it.

    When the posts container is empty the aggregate document is not read or
    written and a ``skipped`` result is returned.

    Raises:
        TagSyncError: the scan or the write failed, or the ETag conflict
            persisted through ``max_attempts`` tries
    """
    log_info(run_trace_id, "tags:sync_started", kind=kind.name)
    try:
        tags, scanned = collect_unique_tags(
            client.iter_items(POSTS_CONTAINER, page_size=page_size),
            kind.post_field,
        )
    except AzureError as exc:
        status = getattr(exc, "status_code", None)
        log_error(run_trace_id, "tags:scan_failed", kind=kind.name, status=status, error=str(exc))
        raise TagSyncError(kind.name, f"Error scanning posts for {kind.name}: {exc.message}", details={"status": status}) from exc

    if scanned == 0:
        log_warning(run_trace_id, "tags:no_posts", kind=kind.name)
        return TagSyncResult(kind=kind.name, status="skipped")

    log_info(run_trace_id, "tags:collected", kind=kind.name, postsScanned=scanned, count=len(tags), tags=tags)

    attempts = 0

    def _on_conflict(details: Dict[str, Any]) -> None:
        log_warning(
            run_trace_id,
            "tags:write_conflict",
            kind=kind.name,
            attempt=details["tries"],
            waitSeconds=round(details["wait"], 3),
        )

    @backoff.on_exception(
        backoff.expo,
        AggregateConflictError,
        max_tries=max_attempts,
        on_backoff=_on_conflict,
        factor=CONFLICT_BACKOFF_FACTOR,
        max_value=CONFLICT_BACKOFF_MAX,
    )
    def _write() -> Tuple[Dict[str, Any], bool]:
        nonlocal attempts
        attempts += 1
        return _write_aggregate(client, kind, tags, now())

    try:
        body, created = _write()
    except AggregateConflictError as exc:
        log_error(run_trace_id, "tags:write_conflict_exhausted", kind=kind.name, attempts=attempts)
        raise TagSyncError(kind.name, f"Gave up after {attempts} conflicting writes", details=exc.details) from exc
    except AzureError as exc:
        status = getattr(exc, "status_code", None)
        log_error(run_trace_id, "tags:write_failed", kind=kind.name, status=status, error=str(exc))
        raise TagSyncError(kind.name, f"Error writing {kind.name} aggregate: {exc.message}", details={"status": status}) from exc

    log_info(
        run_trace_id,
        "tags:created" if created else "tags:updated",
        kind=kind.name,
        document=f"/{kind.container}/{kind.document_id}",
        count=len(tags),
    )
    return TagSyncResult(
        kind=kind.name,
        status="completed",
        postsScanned=scanned,
        tags=tags,
        count=len(tags),
        created=created,
        createdAt=body.get("createdAt"),
        updatedAt=body["updatedAt"],
        attempts=attempts,
    )
