import os
from typing import Any, Dict, Optional
import azure.functions as func

from blogcms.shared.cosmos_client import CosmosDBClient, get_cosmos_client
from blogcms.functions.sync_tags import DEFAULT_MAX_ATTEMPTS
from blogcms.shared.logging_utils import info as log_info
from blogcms.shared.settings import get_settings
from blogcms.specs.tag_kinds import CATEGORIES, LABELS, TagKind
from blogcms.tools.sync_tags_tool import sync_tags_tool


bp = func.Blueprint()

# NCRONTAB (with seconds); hourly by default
TAG_SYNC_SCHEDULE = os.getenv("TAG_SYNC_SCHEDULE", "0 0 * * * *")


def handle_tag_sync_timer(
    timer: func.TimerRequest,
    kind: TagKind,
    client: Optional[CosmosDBClient] = None,
) -> Dict[str, Any]:
    if timer.past_due:
        log_info(None, "tags:timer_past_due", kind=kind.name)
    max_attempts = DEFAULT_MAX_ATTEMPTS
    if client is None:
        client, max_attempts = get_cosmos_client(), get_settings().tag_sync_max_attempts
    return sync_tags_tool(client, kind, max_attempts=max_attempts)


@bp.function_name(name="sync_categories_timer")
@bp.timer_trigger(arg_name="timer", schedule=TAG_SYNC_SCHEDULE, run_on_startup=False)
def sync_categories_timer(timer: func.TimerRequest) -> None:
    handle_tag_sync_timer(timer, CATEGORIES)


@bp.function_name(name="sync_labels_timer")
@bp.timer_trigger(arg_name="timer", schedule=TAG_SYNC_SCHEDULE, run_on_startup=False)
def sync_labels_timer(timer: func.TimerRequest) -> None:
    handle_tag_sync_timer(timer, LABELS)
