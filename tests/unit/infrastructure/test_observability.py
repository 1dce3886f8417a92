"""Unit tests for structlog configuration and correlation ids."""

import asyncio
import re
from collections.abc import Iterator

import pytest
import structlog

from posta.bootstrap.logging import configure_logging
from posta.infrastructure.observability.correlation import (
    correlation_id_processor,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from posta.infrastructure.observability.logging import (
    ENVIRONMENT_ENV,
    configure_structlog,
    redact_message_text,
    resolve_environment,
)


@pytest.fixture(autouse=True)
def _restore_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    set_correlation_id("")


def _processors_of(kind: type) -> list[object]:
    return [p for p in structlog.get_config()["processors"] if isinstance(p, kind)]


class TestConfigureStructlog:
    def test_production_renders_json(self) -> None:
        assert configure_structlog("production") == "production"
        assert _processors_of(structlog.processors.JSONRenderer)

    def test_development_renders_console(self) -> None:
        configure_structlog("development")

        assert _processors_of(structlog.dev.ConsoleRenderer)
        assert not _processors_of(structlog.processors.JSONRenderer)

    def test_environment_variable_used_when_omitted(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENVIRONMENT_ENV, "development")

        assert configure_logging() == "development"

    def test_unknown_environment_rejected(self) -> None:
        with pytest.raises(ValueError, match="POSTA_ENVIRONMENT"):
            resolve_environment("staging")

    def test_processors_installed(self) -> None:
        configure_logging("production")
        processors = structlog.get_config()["processors"]

        assert correlation_id_processor in processors
        assert redact_message_text in processors


class TestRedaction:
    def test_message_text_replaced_with_length(self) -> None:
        event = redact_message_text(
            None, "info", {"event": "case_created", "raw_message": "I need school fees"}
        )

        assert event["raw_message"] == "<redacted 18 chars>"
        assert event["event"] == "case_created"

    def test_identifiers_untouched(self) -> None:
        event = redact_message_text(None, "info", {"case_id": "case_1", "text": None})

        assert event == {"case_id": "case_1", "text": None}


class TestCorrelationId:
    def test_generated_ids_are_uuid4(self) -> None:
        pattern = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")

        assert pattern.match(generate_correlation_id())

    def test_processor_adds_id_when_set(self) -> None:
        set_correlation_id("tx_42")

        event = correlation_id_processor(None, "info", {"event": "case_created"})

        assert event["correlation_id"] == "tx_42"

    def test_processor_skips_empty_id(self) -> None:
        event = correlation_id_processor(None, "info", {"event": "case_created"})

        assert "correlation_id" not in event

    def test_scope_restores_previous_id(self) -> None:
        set_correlation_id("outer")

        with correlation_scope("tx_1") as bound:
            assert bound == "tx_1"
            assert get_correlation_id() == "tx_1"

        assert get_correlation_id() == "outer"

    @pytest.mark.asyncio
    async def test_ids_isolated_between_tasks(self) -> None:
        async def handle(transaction_id: str) -> str:
            set_correlation_id(transaction_id)
            await asyncio.sleep(0)
            return get_correlation_id()

        results = await asyncio.gather(handle("tx_a"), handle("tx_b"))

        assert results == ["tx_a", "tx_b"]
