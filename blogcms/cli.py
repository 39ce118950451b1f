"""
Command-line entry points for the maintenance operations.

Every command prints the result envelope as JSON and exits 0 when the status
is "completed" or "skipped", 1 when it is "failed".
"""
import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from blogcms.functions.sync_tags import DEFAULT_MAX_ATTEMPTS
from blogcms.shared.cosmos_client import CosmosDBClient
from blogcms.shared.logging_utils import configure_logging, error as log_error
from blogcms.shared.settings import Settings
from blogcms.specs.common.errors import BlogCmsError
from blogcms.specs.tag_kinds import CATEGORIES, LABELS, TagKind
from blogcms.tools.add_post_tool import add_post_tool
from blogcms.tools.sync_tags_tool import sync_tags_tool

EXIT_OK = 0
EXIT_FAILED = 1


def exit_code_for(envelope: Dict[str, Any]) -> int:
    return EXIT_FAILED if envelope.get("status") == "failed" else EXIT_OK


def _emit(envelope: Dict[str, Any]) -> int:
    print(json.dumps(envelope, indent=2, ensure_ascii=False))
    return exit_code_for(envelope)


def _build_client() -> CosmosDBClient:
    return CosmosDBClient.from_settings(Settings.from_env())


def _load_payload(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _failed(code: str, message: str) -> Dict[str, Any]:
    return {"status": "failed", "result": None, "error": {"code": code, "message": message}, "meta": None}


def add_post_main(argv: Optional[List[str]] = None, client: Optional[CosmosDBClient] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="blogcms-add-post",
        description="Insert a post document keyed by its slug.",
    )
    parser.add_argument("payload", help="Path to a JSON post payload, or - for stdin")
    parser.add_argument(
        "--no-overwrite",
        dest="overwrite",
        action="store_false",
        help="Fail instead of replacing an existing post with the same slug",
    )
    args = parser.parse_args(argv)
    configure_logging(console=True)

    try:
        payload = _load_payload(args.payload)
    except (OSError, ValueError) as exc:
        log_error(None, "cli:payload_unreadable", path=args.payload, error=str(exc))
        return _emit(_failed("INVALID_PAYLOAD", f"Could not read payload: {exc}"))

    try:
        client = client or _build_client()
    except BlogCmsError as exc:
        log_error(None, "cli:configuration_failed", error=str(exc))
        return _emit(_failed(exc.code, str(exc)))

    return _emit(add_post_tool(client, payload, overwrite=args.overwrite))


def _sync_main(kind: TagKind, argv: Optional[List[str]], client: Optional[CosmosDBClient]) -> int:
    parser = argparse.ArgumentParser(
        prog=f"blogcms-sync-{kind.name}",
        description=f"Rebuild /{kind.container}/{kind.document_id} from the {kind.post_field} of every post.",
    )
    parser.add_argument("--page-size", type=int, default=None, help="Posts fetched per round trip")
    args = parser.parse_args(argv)
    configure_logging(console=True)

    max_attempts = DEFAULT_MAX_ATTEMPTS
    try:
        if client is None:
            settings = Settings.from_env()
            client = CosmosDBClient.from_settings(settings)
            max_attempts = settings.tag_sync_max_attempts
    except BlogCmsError as exc:
        log_error(None, "cli:configuration_failed", error=str(exc))
        return _emit(_failed(exc.code, str(exc)))

    return _emit(sync_tags_tool(client, kind, page_size=args.page_size, max_attempts=max_attempts))


def sync_categories_main(argv: Optional[List[str]] = None, client: Optional[CosmosDBClient] = None) -> int:
    return _sync_main(CATEGORIES, argv, client)


def sync_labels_main(argv: Optional[List[str]] = None, client: Optional[CosmosDBClient] = None) -> int:
    return _sync_main(LABELS, argv, client)
