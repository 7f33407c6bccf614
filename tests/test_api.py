"""HTTP tests for the routes exposed by api.create_app."""

import os
import tempfile
import unittest
from fastapi.testclient import TestClient

from api import create_app
from case_fetcher import AsyncCaseFetcher, MockCaseFetcher
from config import Settings
from constants import TEMPLATES_DIR
from renderer import TemplateRenderer
from schemas import CaseRecord

TIMESTAMP_RE = r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}"


def make_settings(**overrides):
    values = {"database_url": "sqlite+aiosqlite://"}
    values.update(overrides)
    return Settings(**values)


class TrackingFetcher(MockCaseFetcher):
    def __init__(self, cases=None):
        super().__init__(cases)
        self.closed = False

    async def close(self):
        self.closed = True


class TestRoutes(unittest.TestCase):
    """Index, cases page, case table and static files."""

    def setUp(self):
        cases = [CaseRecord(id=i, message=f"Case {i}", status="Open")
                 for i in range(1, 13)]
        self.fetcher = TrackingFetcher(cases)
        self.app = create_app(make_settings(), fetcher=self.fetcher)

    def test_index_shows_timestamp(self):
        with TestClient(self.app) as client:
            response = client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("text/html", response.headers["content-type"])
        self.assertRegex(response.text, TIMESTAMP_RE)

    def test_cases_page(self):
        with TestClient(self.app) as client:
            response = client.get("/cases")
        self.assertEqual(response.status_code, 200)
        self.assertIn('id="case-rows"', response.text)
        self.assertEqual(self.fetcher.requests, [])

    def test_case_table_pages(self):
        with TestClient(self.app) as client:
            first = client.get("/casetable", params={"page": 0})
            second = client.get("/casetable", params={"page": 1})
        self.assertEqual(first.text.count('class="case-row"'), 10)
        self.assertEqual(second.text.count('class="case-row"'), 2)
        self.assertIn("/casetable?page=2", second.text)

    def test_case_table_without_page(self):
        with TestClient(self.app) as client:
            default = client.get("/casetable")
            negative = client.get("/casetable?page=-4")
        self.assertEqual(default.status_code, 200)
        self.assertEqual(negative.text, default.text)
        self.assertEqual(self.fetcher.requests, [(0, 10), (0, 10)])

    def test_case_table_rejects_non_integer_page(self):
        with TestClient(self.app) as client:
            response = client.get("/casetable?page=abc")
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.fetcher.requests, [])

    def test_static_files(self):
        with TestClient(self.app) as client:
            css = client.get("/static/style.css")
            missing = client.get("/static/nope.css")
        self.assertEqual(css.status_code, 200)
        self.assertIn("table.cases", css.text)
        self.assertEqual(missing.status_code, 404)

    def test_unknown_path_is_404(self):
        with TestClient(self.app) as client:
            response = client.get("/does-not-exist")
        self.assertEqual(response.status_code, 404)

    def test_only_get_is_routed(self):
        with TestClient(self.app) as client:
            response = client.post("/casetable")
        self.assertEqual(response.status_code, 405)

    def test_fetcher_closed_on_shutdown(self):
        with TestClient(self.app):
            self.assertFalse(self.fetcher.closed)
        self.assertTrue(self.fetcher.closed)


class TestErrorHandling(unittest.TestCase):
    """Render failures, store failures and startup failures."""

    def test_render_error_returns_plain_text_500(self):
        with tempfile.TemporaryDirectory() as tmp:
            # в контексте cases.html нет переменной now, index.html отсутствует
            with open(os.path.join(tmp, "cases.html"), "w") as f:
                f.write("{{ now }}")
            renderer = TemplateRenderer(tmp)
            renderer.load_all()
            app = create_app(make_settings(), renderer=renderer,
                             fetcher=MockCaseFetcher())

            with TestClient(app) as client:
                index = client.get("/")
                cases = client.get("/cases")
                table = client.get("/casetable")

        for response in (index, cases, table):
            self.assertEqual(response.status_code, 500)
            self.assertEqual(response.text, "Template error")
            self.assertIn("text/plain", response.headers["content-type"])

    def test_unreachable_database_yields_empty_table(self):
        url = "sqlite+aiosqlite:////nonexistent/directory/cases.db"
        app = create_app(make_settings(database_url=url),
                         fetcher=AsyncCaseFetcher(url))

        with TestClient(app) as client:
            response = client.get("/casetable?page=3")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text.count('class="case-row"'), 0)
        self.assertIn("No more cases", response.text)

    def test_mock_source_from_settings(self):
        app = create_app(make_settings(cases_source="mock"))
        with TestClient(app) as client:
            response = client.get("/casetable")
        self.assertEqual(response.text.count('class="case-row"'), 3)

    def test_missing_templates_abort_startup(self):
        with self.assertRaises(SystemExit) as ctx:
            create_app(make_settings(templates_dir="/nonexistent/templates"))
        self.assertEqual(ctx.exception.code, 1)

    def test_bundled_templates_used_by_default(self):
        app = create_app(make_settings(templates_dir=TEMPLATES_DIR),
                         fetcher=MockCaseFetcher())
        with TestClient(app) as client:
            self.assertEqual(client.get("/").status_code, 200)


if __name__ == "__main__":
    unittest.main()
