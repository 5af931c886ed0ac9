"""Market risk sentiment classification."""
