# 📄 File: tests/test_logging.py
# 🧭 Purpose (Layman Explanation):
# Checks that every log line says which catalog question produced it and in which
# language, so one slow or failing lookup can be traced through the logs.
# 🧪 Purpose (Technical Summary):
# log_context binding and reset, CatalogContextFilter + CatalogJSONFormatter output,
# engine operations stamping their query name and locale, and setup_logging wiring.
# 🔗 Dependencies:
# pytest, pytest-asyncio, python-json-logger (via app.shared.utils.logging)
# 🔄 Connected Modules / Calls From:
# pytest

import io
import json
import logging

import pytest

from app.shared.utils import logging as catalog_logging
from app.shared.utils.logging import (
    CatalogContextFilter,
    CatalogJSONFormatter,
    get_logger,
    locale_var,
    log_context,
    operation_var,
    setup_logging,
)
from catalog_fixtures import TOMATO


class _Collector(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []
        self.addFilter(CatalogContextFilter())

    def emit(self, record):
        self.records.append(record)


def _record(message="hello"):
    return logging.LogRecord("app.test", logging.INFO, __file__, 1, message, None, None)


class TestLogContext:
    def test_binds_and_resets(self):
        with log_context("GetPlantQuery", "es", "MX") as operation_id:
            assert operation_var.get() == "GetPlantQuery"
            assert locale_var.get() == "es-MX"
            assert operation_id
        assert operation_var.get() == ""
        assert locale_var.get() == ""

    def test_nested_context_keeps_operation_id(self):
        with log_context("SearchPlantsQuery", "en") as outer:
            with log_context("fetch_names") as inner:
                assert inner == outer
                assert locale_var.get() == ""
            assert operation_var.get() == "SearchPlantsQuery"


class TestJSONOutput:
    def test_context_and_extra_fields_are_emitted(self):
        record = _record()
        record.extra_fields = {"cache_key": "test:plant:1"}
        with log_context("GetPlantQuery", "fr"):
            CatalogContextFilter().filter(record)

        payload = json.loads(CatalogJSONFormatter().format(record))

        assert payload["operation"] == "GetPlantQuery"
        assert payload["locale"] == "fr"
        assert payload["cache_key"] == "test:plant:1"
        assert payload["level"] == "INFO"
        assert "extra_fields" not in payload

    def test_empty_context_is_left_out(self):
        record = _record()
        CatalogContextFilter().filter(record)
        payload = json.loads(CatalogJSONFormatter().format(record))
        assert "operation" not in payload
        assert "locale" not in payload


class TestEngineLogging:
    @pytest.mark.asyncio
    async def test_cache_timings_carry_the_operation(self, catalog):
        collector = _Collector()
        cache_logger = logging.getLogger("app.modules.plant_catalog.infrastructure.cache.cached_plant_repository")
        previous_level = cache_logger.level
        cache_logger.addHandler(collector)
        cache_logger.setLevel(logging.DEBUG)
        try:
            await catalog.find_by_id(TOMATO, "es", "MX")
        finally:
            cache_logger.removeHandler(collector)
            cache_logger.setLevel(previous_level)

        misses = [r for r in collector.records if getattr(r, "cache_hit", None) is False]
        assert misses
        assert misses[0].operation == "GetPlantQuery"
        assert misses[0].locale == "es-MX"
        assert misses[0].operation_id

    def test_structured_warning_fields(self, caplog):
        with caplog.at_level(logging.WARNING):
            get_logger("app.test").warning("Cache write failed for k", cache_key="k")
        assert caplog.records[0].extra_fields == {"cache_key": "k"}


class TestSetupLogging:
    def test_json_handler_on_root(self, monkeypatch):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        monkeypatch.setattr(catalog_logging, "_logging_configured", False)
        stream = io.StringIO()
        try:
            setup_logging(log_level="info", log_format="json", stream=stream)
            with log_context("ListLanguagesQuery"):
                logging.getLogger("app.test").info("listed")
            assert setup_logging() is logging.getLogger("app")
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)

        line = json.loads(stream.getvalue().splitlines()[-1])
        assert line["message"] == "listed"
        assert line["operation"] == "ListLanguagesQuery"
