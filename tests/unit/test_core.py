"""
Core Unit Tests.

Tests for the exception hierarchy and structured logging.
"""

import json
import uuid

from delta_vault.core import (
    AccessError,
    DepositTooSmallError,
    NotOwnerError,
    VaultError,
    VaultLogger,
    ZeroAmountError,
    get_correlation_id,
    get_logger,
    set_correlation_id,
    clear_request_context,
    with_correlation_id,
)


class TestVaultErrors:
    """Test the vault exception hierarchy."""

    def test_defaults(self):
        error = ZeroAmountError()
        assert error.message == "Amount must be greater than zero"
        assert error.code == "ZeroAmount"
        assert error.details == {}

    def test_str_includes_code_and_details(self):
        error = DepositTooSmallError(5, 10)
        text = str(error)

        assert "below minimum 10" in text
        assert "[DepositTooSmall]" in text
        assert "'min_deposit': 10" in text

    def test_hierarchy(self):
        assert issubclass(NotOwnerError, AccessError)
        assert issubclass(AccessError, VaultError)

    def test_custom_code(self):
        error = VaultError("boom", code="Custom")
        assert error.code == "Custom"
        assert "boom" in repr(error)


class TestStructuredLogging:
    """Test JSON log output."""

    def test_writes_json_lines(self, tmp_path):
        logger = VaultLogger(f"test-{uuid.uuid4().hex}", log_dir=tmp_path)
        logger.deposit("alice", 100, 100, 50, 50)
        for handler in logger._logger.handlers:
            handler.flush()

        lines = (tmp_path / "vault.jsonl").read_text(encoding="utf-8").splitlines()
        record = json.loads(lines[-1])

        assert record["channel"] == "vault"
        assert record["event_type"] == "vault.deposit"
        assert record["context"]["account"] == "alice"
        assert record["data"]["spot_amount"] == 50

    def test_correlation_id_in_context(self, tmp_path):
        logger = VaultLogger(f"test-{uuid.uuid4().hex}", log_dir=tmp_path)
        cid = set_correlation_id("req-123")
        try:
            logger.rolled_back("deposit", "0123456789abcdef", "short fill")
        finally:
            clear_request_context()
        for handler in logger._logger.handlers:
            handler.flush()

        record = json.loads((tmp_path / "vault.jsonl").read_text(encoding="utf-8").splitlines()[-1])
        assert cid == "req-123"
        assert record["context"]["correlation_id"] == "req-123"
        assert record["level"] == "WARNING"

    def test_with_correlation_id_scopes_generated_id(self):
        seen = []

        @with_correlation_id
        def operation():
            seen.append(get_correlation_id())

        operation()
        operation()

        assert seen[0] and seen[1]
        assert seen[0] != seen[1]
        assert get_correlation_id() is None

    def test_with_correlation_id_keeps_outer_id(self):
        seen = []

        @with_correlation_id
        def operation():
            seen.append(get_correlation_id())

        set_correlation_id("outer")
        try:
            operation()
        finally:
            clear_request_context()

        assert seen == ["outer"]


class TestLogger:
    """Test package logger naming."""

    def test_module_loggers_share_package_handlers(self):
        package = get_logger("delta_vault")
        child = get_logger("delta_vault.vault.vault")

        assert package.handlers
        assert child.name.startswith("delta_vault.")
        assert not child.handlers

    def test_foreign_names_rerooted(self):
        assert get_logger("scenario").name == "delta_vault.scenario"
