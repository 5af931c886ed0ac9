"""Tests for custom errors."""
from fxbias.utils.errors import (
    AnalysisError,
    CacheError,
    ConfigurationError,
    DataNotFoundError,
    DataProviderError,
    FxBiasError,
    PersistenceError,
    RateLimitError,
    ValidationError,
)


def test_error_hierarchy():
    """Test error inheritance."""
    for error in (ConfigurationError, ValidationError, DataProviderError, AnalysisError, CacheError, PersistenceError):
        assert issubclass(error, FxBiasError)
    assert issubclass(RateLimitError, DataProviderError)
    assert issubclass(DataNotFoundError, DataProviderError)


def test_error_messages():
    """Test error messages."""
    error = ConfigurationError("Test message")
    assert str(error) == "Test message"
