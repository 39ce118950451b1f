import json
from typing import Optional
import azure.functions as func

from blogcms.shared.cosmos_client import CosmosDBClient, get_cosmos_client
from blogcms.functions.sync_tags import DEFAULT_MAX_ATTEMPTS
from blogcms.shared.logging_utils import error as log_error
from blogcms.shared.settings import get_settings
from blogcms.specs.tag_kinds import TAG_KINDS
from blogcms.tools.sync_tags_tool import sync_tags_tool


bp = func.Blueprint()


def handle_sync_tags(req: func.HttpRequest, client: Optional[CosmosDBClient] = None) -> func.HttpResponse:
    kind_name = (req.route_params.get("kind") or "").lower()
    kind = TAG_KINDS.get(kind_name)
    if kind is None:
        log_error(None, "tags:unknown_kind", kind=kind_name)
        return func.HttpResponse(f"Unknown tag kind '{kind_name}'", status_code=404)

    max_attempts = DEFAULT_MAX_ATTEMPTS
    if client is None:
        client, max_attempts = get_cosmos_client(), get_settings().tag_sync_max_attempts
    envelope = sync_tags_tool(client, kind, max_attempts=max_attempts)
    return func.HttpResponse(
        body=json.dumps(envelope),
        mimetype="application/json",
        status_code=500 if envelope["status"] == "failed" else 200,
    )


@bp.function_name(name="sync_tags")
@bp.route(route="tags/{kind}/sync", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def sync_tags_http(req: func.HttpRequest) -> func.HttpResponse:
    return handle_sync_tags(req)
