"""Unit tests for structured logging setup."""

import structlog

from kvgraph.core.config import Settings
from kvgraph.core.logging import (
    LoggingContext,
    add_logger_name,
    configure_logging,
    get_logger,
    rename_message_field,
)


class TestProcessors:
    def test_rename_message_field(self) -> None:
        assert rename_message_field(None, "info", {"event": "hello"}) == {"message": "hello"}

    def test_add_logger_name_defaults(self) -> None:
        assert add_logger_name(object(), "info", {})["logger"] == "kvgraph"


class TestConfigureLogging:
    def test_json_output_outside_development(self, capsys) -> None:
        configure_logging(Settings(environment="testing", log_format="json"))

        get_logger("kvgraph.test").info("Document created", document_id="1")

        err = capsys.readouterr().err
        assert '"message": "Document created"' in err
        assert '"document_id": "1"' in err

    def test_level_filters_lower_levels(self, capsys) -> None:
        configure_logging(Settings(environment="testing", log_level="WARNING"))

        get_logger("kvgraph.test").info("hidden")

        assert "hidden" not in capsys.readouterr().err


class TestLoggingContext:
    def test_binds_and_resets_context(self) -> None:
        with LoggingContext(collection="users"):
            assert structlog.contextvars.get_contextvars() == {"collection": "users"}

        assert structlog.contextvars.get_contextvars() == {}
