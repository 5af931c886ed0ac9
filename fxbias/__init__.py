"""Currency bias engine: indicator scores, market risk sentiment and pair biases."""

__version__ = "0.1.0"
