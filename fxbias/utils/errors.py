"""Custom exception classes for fxbias."""


class FxBiasError(Exception):
    """Base exception for all fxbias errors."""
    pass


class ConfigurationError(FxBiasError):
    """Raised when there's a configuration error."""
    pass


class ValidationError(FxBiasError):
    """Raised when input violates a type or range contract."""
    pass


class DataProviderError(FxBiasError):
    """Base exception for market data provider errors."""
    pass


class RateLimitError(DataProviderError):
    """Raised when API rate limit is exceeded."""
    pass


class DataNotFoundError(DataProviderError):
    """Raised when requested data is not available."""
    pass


class AnalysisError(FxBiasError):
    """Raised when an indicator analysis or recap cannot be produced."""
    pass


class CacheError(FxBiasError):
    """Raised when cache operations fail."""
    pass


class PersistenceError(FxBiasError):
    """Raised when saved state cannot be read or written."""
    pass
