"""Market data used by the risk sentiment engine."""

from .alpha_vantage import AlphaVantageClient
from .service import fetch_and_analyze_risk_sentiment

__all__ = [
    "AlphaVantageClient",
    "fetch_and_analyze_risk_sentiment",
]
