import json
from typing import Optional
import azure.functions as func

from blogcms.shared.cosmos_client import CosmosDBClient, get_cosmos_client
from blogcms.shared.logging_utils import error as log_error
from blogcms.tools.add_post_tool import add_post_tool


bp = func.Blueprint()

STATUS_BY_ERROR_CODE = {
    "INVALID_POST": 400,
    "POST_ALREADY_EXISTS": 409,
}


def _json_response(body: dict, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        body=json.dumps(body),
        mimetype="application/json",
        status_code=status_code,
    )


def handle_add_post(req: func.HttpRequest, client: Optional[CosmosDBClient] = None) -> func.HttpResponse:
    try:
        data = req.get_json()
    except ValueError:
        log_error(None, "post:invalid_json")
        return _json_response(
            {"status": "failed", "error": {"code": "INVALID_JSON", "message": "Invalid JSON body"}},
            400,
        )

    overwrite = (req.params.get("overwrite") or "true").lower() not in ("false", "0", "no")
    envelope = add_post_tool(client or get_cosmos_client(), data, overwrite=overwrite)
    if envelope["status"] == "completed":
        return _json_response(envelope, 201)
    return _json_response(envelope, STATUS_BY_ERROR_CODE.get(envelope["error"]["code"], 500))


@bp.function_name(name="add_post")
@bp.route(route="posts", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def add_post_http(req: func.HttpRequest) -> func.HttpResponse:
    return handle_add_post(req)
