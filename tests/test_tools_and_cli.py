import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from azure.cosmos import exceptions

from blogcms import cli
from blogcms.specs.tag_kinds import CATEGORIES
from blogcms.tools.add_post_tool import add_post_tool
from blogcms.tools.sync_tags_tool import sync_tags_tool
from tests.fakes import make_client

POST = {
    "title": "Hello",
    "slug": "hello",
    "image": "https://example.com/hello.png",
    "description": "First post",
    "contentUnits": [{"typeO": "string", "title": "Body", "content": "Hi there"}],
    "categories": ["Tech"],
    "labels": ["intro"],
}


class AddPostToolTests(unittest.TestCase):
    def test_completed_envelope(self):
        client, _ = make_client()
        envelope = add_post_tool(client, POST)

        self.assertEqual(envelope["status"], "completed")
        self.assertEqual(envelope["result"], {"slug": "hello"})
        self.assertIsNone(envelope["error"])
        self.assertTrue(envelope["meta"]["overwrite"])
        self.assertIn("durationMs", envelope["meta"])

    def test_failed_envelope_carries_error_code(self):
        client, _ = make_client()
        envelope = add_post_tool(client, {**POST, "slug": ""})

        self.assertEqual(envelope["status"], "failed")
        self.assertEqual(envelope["error"]["code"], "INVALID_POST")

    def test_conflict_envelope(self):
        client, _ = make_client()
        add_post_tool(client, POST)
        envelope = add_post_tool(client, POST, overwrite=False)

        self.assertEqual(envelope["error"]["code"], "POST_ALREADY_EXISTS")


class SyncTagsToolTests(unittest.TestCase):
    def test_skipped_when_no_posts(self):
        client, _ = make_client()
        envelope = sync_tags_tool(client, CATEGORIES)

        self.assertEqual(envelope["status"], "skipped")
        self.assertEqual(envelope["result"]["count"], 0)
        self.assertEqual(envelope["meta"]["document"], "/categories/all")

    def test_completed(self):
        client, _ = make_client()
        add_post_tool(client, POST)
        envelope = sync_tags_tool(client, CATEGORIES)

        self.assertEqual(envelope["status"], "completed")
        self.assertEqual(envelope["result"]["tags"], ["Tech"])

    def test_store_failure_is_reported_not_raised(self):
        client, database = make_client()
        database.get_container_client("posts").fail_on["query_items"] = exceptions.CosmosHttpResponseError(
            status_code=401, message="Unauthorized"
        )
        envelope = sync_tags_tool(client, CATEGORIES)

        self.assertEqual(envelope["status"], "failed")
        self.assertEqual(envelope["error"]["code"], "TAG_SYNC_ERROR")


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client, self.database = make_client()
        self.tmp = tempfile.TemporaryDirectory()
        self.payload_path = Path(self.tmp.name) / "post.json"
        self.payload_path.write_text(json.dumps(POST), encoding="utf-8")

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def _run(self, main, argv):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(argv, client=self.client)
        return code, json.loads(out.getvalue())

    def test_add_post_exit_zero_on_success(self):
        code, envelope = self._run(cli.add_post_main, [str(self.payload_path)])

        self.assertEqual(code, 0)
        self.assertEqual(envelope["result"]["slug"], "hello")
        self.assertIn("hello", self.database.get_container_client("posts").items)

    def test_add_post_exit_one_on_conflict(self):
        self._run(cli.add_post_main, [str(self.payload_path)])
        code, envelope = self._run(cli.add_post_main, [str(self.payload_path), "--no-overwrite"])

        self.assertEqual(code, 1)
        self.assertEqual(envelope["error"]["code"], "POST_ALREADY_EXISTS")

    def test_add_post_exit_one_on_unreadable_payload(self):
        self.payload_path.write_text("{not json", encoding="utf-8")
        code, envelope = self._run(cli.add_post_main, [str(self.payload_path)])

        self.assertEqual(code, 1)
        self.assertEqual(envelope["error"]["code"], "INVALID_PAYLOAD")

    def test_sync_exit_zero_when_no_posts(self):
        code, envelope = self._run(cli.sync_categories_main, [])

        self.assertEqual(code, 0)
        self.assertEqual(envelope["status"], "skipped")

    def test_sync_labels_writes_label_aggregate(self):
        self._run(cli.add_post_main, [str(self.payload_path)])
        code, envelope = self._run(cli.sync_labels_main, ["--page-size", "10"])

        self.assertEqual(code, 0)
        self.assertEqual(envelope["result"]["tags"], ["intro"])
        self.assertEqual(self.database.get_container_client("labels").items["all"]["tags"], ["intro"])

    def test_sync_exit_one_when_write_fails(self):
        self._run(cli.add_post_main, [str(self.payload_path)])
        self.database.get_container_client("categories").fail_on["create_item"] = (
            exceptions.CosmosHttpResponseError(status_code=500, message="Internal")
        )
        code, envelope = self._run(cli.sync_categories_main, [])

        self.assertEqual(code, 1)
        self.assertEqual(envelope["status"], "failed")

    def test_missing_configuration_exits_one(self):
        out = io.StringIO()
        with mock.patch.dict(os.environ, {}, clear=True), redirect_stdout(out):
            code = cli.sync_categories_main([])

        self.assertEqual(code, 1)
        self.assertEqual(json.loads(out.getvalue())["error"]["code"], "CONFIGURATION_ERROR")

    def test_exit_code_mapping(self):
        self.assertEqual(cli.exit_code_for({"status": "completed"}), 0)
        self.assertEqual(cli.exit_code_for({"status": "skipped"}), 0)
        self.assertEqual(cli.exit_code_for({"status": "failed"}), 1)


if __name__ == "__main__":
    unittest.main()
