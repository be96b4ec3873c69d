"""Tests for the exception hierarchy."""

from graphkeeper.exceptions import (
    AnalysisError,
    AnalysisInProgressError,
    ConfigurationError,
    GraphKeeperError,
    InvalidConfigError,
    NotInitializedError,
)


class TestHierarchy:
    def test_all_derive_from_base(self):
        for cls in (AnalysisError, AnalysisInProgressError, ConfigurationError,
                    InvalidConfigError, NotInitializedError):
            assert issubclass(cls, GraphKeeperError)

    def test_in_progress_is_analysis_error(self):
        assert issubclass(AnalysisInProgressError, AnalysisError)


class TestMessages:
    def test_details_in_str(self):
        error = GraphKeeperError("Boom", details={"path": "/a.py"})
        assert str(error) == "Boom (path=/a.py)"

    def test_plain_message(self):
        assert str(GraphKeeperError("Boom")) == "Boom"

    def test_in_progress(self):
        error = AnalysisInProgressError("/src")
        assert error.message == "Analysis already in progress"
        assert error.root_path == "/src"

    def test_not_initialized(self):
        error = NotInitializedError("FingerprintStore", "storage")
        assert error.message == (
            "FingerprintStore not initialized. Pass storage for first initialization."
        )

    def test_details_are_strings(self):
        error = GraphKeeperError("Boom", details={"line": 3, "path": None})
        assert error.details == {"line": "3", "path": "None"}
        assert str(error) == "Boom (line=3, path=None)"


class TestRecovery:
    def test_base_is_not_recoverable(self):
        error = GraphKeeperError("Boom")
        assert not error.recoverable
        assert error.hint is None

    def test_in_progress_is_recoverable(self):
        error = AnalysisInProgressError("/src")
        assert error.recoverable
        assert "Retry" in error.hint

    def test_config_errors_are_not_recoverable(self):
        assert not InvalidConfigError("batch_size", 0, "must be at least 1").recoverable
