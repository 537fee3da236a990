"""Unit tests for logging configuration."""

import io
import json
import logging

import pytest

from protoid.config import Settings
from protoid.kernel.identity.errors import InvalidEmailError
from protoid.kernel.identity.identity_service import IdentityService
from protoid.logging_config import (
    LIBRARY_LOGGER,
    configure_logging,
    correlation_id_var,
    get_logger,
)
from tests.helpers.fakes import InMemoryIdentityRepository


@pytest.fixture
def restore_library_logger():
    logger = logging.getLogger(LIBRARY_LOGGER)
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def _settings(**overrides) -> Settings:
    values = {"bcrypt_rounds": 4, "environment": "development", "log_level": "INFO"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestGetLogger:

    def test_module_names_stay_in_namespace(self):
        assert get_logger("protoid.kernel.identity.registration").name == "protoid.kernel.identity.registration"
        assert get_logger("protoid").name == "protoid"

    def test_foreign_names_are_nested(self):
        assert get_logger("myapp.auth").name == "protoid.myapp.auth"
        assert get_logger("protoidx").name == "protoid.protoidx"

    def test_library_logger_has_null_handler(self):
        handlers = logging.getLogger(LIBRARY_LOGGER).handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)


class TestConfigureLogging:

    def test_production_emits_json_with_identity_fields(self, restore_library_logger):
        stream = io.StringIO()
        configure_logging(_settings(environment="production"), stream=stream)

        token = correlation_id_var.set("corr-1")
        try:
            get_logger("protoid.test").info(
                "Registered",
                extra={"identity_id": "abc", "merged_proto": True, "unrelated": "x"},
            )
        finally:
            correlation_id_var.reset(token)

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["message"] == "Registered"
        assert record["level"] == "INFO"
        assert record["logger"] == "protoid.test"
        assert record["correlation_id"] == "corr-1"
        assert record["identity_id"] == "abc"
        assert record["merged_proto"] is True
        assert "unrelated" not in record

    def test_development_is_human_readable(self, restore_library_logger):
        stream = io.StringIO()
        configure_logging(_settings(), stream=stream)

        get_logger("protoid.test").warning("Rejected")

        line = stream.getvalue().strip().splitlines()[-1]
        assert "WARNING" in line
        assert "[protoid.test]" in line
        assert "corr=-" in line

    def test_level_from_settings(self, restore_library_logger):
        stream = io.StringIO()
        configure_logging(_settings(log_level="ERROR"), stream=stream)

        get_logger("protoid.test").warning("dropped")

        assert logging.getLogger(LIBRARY_LOGGER).level == logging.ERROR
        assert stream.getvalue() == ""

    def test_debug_overrides_level(self, restore_library_logger):
        configure_logging(_settings(log_level="ERROR", debug=True), stream=io.StringIO())
        assert logging.getLogger(LIBRARY_LOGGER).level == logging.DEBUG

    def test_reconfigure_replaces_handler(self, restore_library_logger):
        configure_logging(_settings(), stream=io.StringIO())
        handler = configure_logging(_settings(), stream=io.StringIO())

        stream_handlers = [
            h for h in logging.getLogger(LIBRARY_LOGGER).handlers
            if not isinstance(h, logging.NullHandler)
        ]
        assert stream_handlers == [handler]

    def test_root_logger_untouched(self, restore_library_logger):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level

        configure_logging(_settings(debug=True), stream=io.StringIO())

        assert root.handlers == handlers
        assert root.level == level


class TestServiceLogging:

    @pytest.mark.asyncio
    async def test_rejection_logged_with_error_code(self, restore_library_logger):
        settings = _settings(environment="production")
        stream = io.StringIO()
        configure_logging(settings, stream=stream)
        service = IdentityService(InMemoryIdentityRepository(), settings=settings)

        with pytest.raises(InvalidEmailError):
            await service.register({"email": "not-an-email", "password": "abc123"})

        records = [json.loads(line) for line in stream.getvalue().strip().splitlines()]
        rejected = [r for r in records if r.get("error_code") == "invalid_email"]
        assert rejected and rejected[-1]["level"] == "WARNING"
        assert "abc123" not in stream.getvalue()
