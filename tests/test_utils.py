"""
Tests for helpers shared across the API: paging, tokens, errors, logging and Sentry scrubbing.
"""

import json
import logging

import pytest

from filevault.consts.error_codes import ErrorCode
from filevault.core.exceptions import AppError
from filevault.middlewares.sentry import _drop_health_transactions, _strip_sensitive
from filevault.utils.base import generate_link_token, page_window, total_pages
from filevault.utils.logging import ColoredFormatter, JSONFormatter


class TestPaging:
    @pytest.mark.parametrize("page, limit, expected", [
        (1, 10, (0, 10)),
        (3, 10, (20, 10)),
        (0, 10, (0, 10)),
        (2, 0, (1, 1)),
    ])
    def test_page_window(self, page, limit, expected):
        assert page_window(page, limit) == expected

    @pytest.mark.parametrize("total, limit, expected", [
        (0, 10, 0),
        (25, 10, 3),
        (30, 10, 3),
        (1, 10, 1),
    ])
    def test_total_pages(self, total, limit, expected):
        assert total_pages(total, limit) == expected


class TestLinkToken:
    def test_token_shape(self):
        token = generate_link_token()

        assert len(token) == 32
        int(token, 16)

    def test_tokens_differ(self):
        assert len({generate_link_token() for _ in range(50)}) == 50


class TestAppError:
    def test_enum_code_normalized(self):
        err = AppError("Folder not found", status_code=404, code=ErrorCode.FOLDER_NOT_FOUND)

        assert err.code == "FOLDER_NOT_FOUND"
        assert str(err) == "Folder not found"
        assert "FOLDER_NOT_FOUND" in repr(err)

    def test_defaults(self):
        err = AppError("bad input")

        assert err.status_code == 400
        assert err.code == "VALIDATION_ERROR"


class TestLogging:
    def _record(self, **extra):
        record = logging.LogRecord("filevault.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
        record.__dict__.update(extra)
        return record

    def test_json_formatter_includes_extra(self):
        payload = json.loads(JSONFormatter().format(self._record(upload_id="u-1")))

        assert payload["message"] == "hello world"
        assert payload["level"] == "INFO"
        assert payload["extra"] == {"upload_id": "u-1"}

    def test_colored_formatter_leaves_record_untouched(self):
        record = self._record()

        output = ColoredFormatter(fmt="%(levelname)s %(message)s").format(record)

        assert "hello world" in output
        assert record.levelname == "INFO"


class TestSentryScrubbing:
    def test_headers_and_tokens_filtered(self):
        event = {"request": {
            "headers": {"Authorization": "Bearer abc", "Accept": "*/*"},
            "url": "https://api.example.com/api/v1/public/0123abcd",
        }}

        scrubbed = _strip_sensitive(event, None)

        assert scrubbed["request"]["headers"]["Authorization"] == "[Filtered]"
        assert scrubbed["request"]["headers"]["Accept"] == "*/*"
        assert scrubbed["request"]["url"].endswith("/public/[Filtered]")

    def test_health_transactions_dropped(self):
        assert _drop_health_transactions({"transaction": "/health"}, None) is None
        assert _drop_health_transactions({"transaction": "/api/v1/search"}, None) is not None
