"""
Unit Tests for terminal rendering
"""
import json

import pytest
from rich.console import Console

from conftest import make_message, paged_handler
from skillswap.endpoints import HELP_SUPPORT, VISITORS
from skillswap.list_controller import ListController
from skillswap.renderer import ListRenderer, format_cell, to_json


@pytest.fixture
def console() -> Console:
    return Console(record=True, width=240)


class TestFormatCell:

    def test_empty_values(self):
        assert format_cell(None) == "-"
        assert format_cell("") == "-"

    def test_bool_and_list(self):
        assert format_cell(True) == "yes"
        assert format_cell(["spam", "abuse"]) == "spam, abuse"

    def test_populated_reference(self):
        assert format_cell({"username": "asha", "email": "a@x.io"}) == "asha"

    def test_truncates_and_flattens(self):
        text = format_cell("line one\nline two " + "x" * 100, max_width=20)

        assert len(text) == 20
        assert "\n" not in text
        assert text.endswith("…")


class TestListRenderer:

    @pytest.mark.asyncio
    async def test_empty_state(self, api, backend, console):
        backend.on("GET", HELP_SUPPORT.path, json_body={"messages": [], "totalPages": 0})
        controller = ListController(HELP_SUPPORT, api)
        await controller.refresh()

        ListRenderer(console).render(controller)

        assert "No messages found" in console.export_text()

    @pytest.mark.asyncio
    async def test_error_banner(self, api, backend, console):
        backend.on("GET", HELP_SUPPORT.path, json_body={"message": "Not authorized"}, status=403)
        controller = ListController(HELP_SUPPORT, api)
        await controller.refresh()

        ListRenderer(console).render(controller)

        output = console.export_text()
        assert "Error" in output
        assert "Not authorized" in output

    @pytest.mark.asyncio
    async def test_table_and_footer(self, api, backend, console):
        backend.on("GET", HELP_SUPPORT.path, paged_handler("messages", total=25))
        controller = ListController(HELP_SUPPORT, api)
        await controller.refresh()

        ListRenderer(console).render(controller)

        output = console.export_text()
        assert "msg0000" in output
        assert "Page 1 of 2" in output
        assert "25 total" in output

    def test_visitor_columns_are_served_fields(self, api, console):
        controller = ListController(VISITORS, api)
        controller.page.items = [{
            "_id": "v1", "visitorId": "visitor-abc", "device": "mobile",
            "browser": "Firefox", "os": "Android", "visitCount": 3,
        }]

        ListRenderer(console).render(controller)

        output = console.export_text()
        assert "mobile" in output
        assert "ipAddress" not in output

    def test_loading_state(self, api, console):
        controller = ListController(HELP_SUPPORT, api)
        controller.request.loading = True

        ListRenderer(console).render(controller)

        assert "Loading messages" in console.export_text()

    def test_stats_panel(self, console):
        ListRenderer(console).render_stats({"total": 9, "pending": 4, "replied": 3, "resolved": 2})

        output = console.export_text()
        assert "Total: 9" in output
        assert "Resolved: 2" in output


class TestToJson:

    def test_snapshot(self, api):
        controller = ListController(HELP_SUPPORT, api)
        controller.page.items = [make_message(1)]

        payload = json.loads(to_json(controller))

        assert payload["endpoint"] == "messages"
        assert payload["filters"]["status"] == "all"
        assert payload["items"][0]["_id"] == "msg0001"
        assert payload["error"] is None
