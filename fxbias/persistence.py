"""JSON file persistence for an AnalysisStore."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from fxbias.analysis.serialization import engine_state_from_dict, engine_state_to_dict
from fxbias.analysis.store import AnalysisStore, EngineState
from fxbias.cache import TTLCache
from fxbias.utils.errors import PersistenceError, ValidationError
from fxbias.utils.logging import get_logger


logger = get_logger(__name__)


class JsonStateStore:
    """Reads and writes the full engine state as one JSON document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self, cache: Optional[TTLCache] = None, defaults: Optional[EngineState] = None) -> AnalysisStore:
        """
        Load a store from disk; a missing file yields an empty store.

        Derived fields (base scores, directions, sentiment) are rebuilt on
        load rather than trusted from the file.

        Raises:
            PersistenceError: If the file is not valid JSON or not a state document
        """
        if not self.path.exists():
            logger.info(f"No state file at {self.path}, starting empty")
            return AnalysisStore(state=defaults, cache=cache)

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read state file {self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise PersistenceError(f"State file {self.path} does not contain a JSON object")

        try:
            state, history = engine_state_from_dict(raw)
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise PersistenceError(f"Invalid state in {self.path}: {e}") from e

        logger.info(
            f"Loaded state from {self.path}",
            extra={"currencies": len(state.analysis_data), "snapshots": len(history)},
        )
        return AnalysisStore(state=state, history=history, cache=cache)

    def save(self, store: AnalysisStore) -> Path:
        payload = engine_state_to_dict(store.state, store.history)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
            tmp.replace(self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write state file {self.path}: {e}") from e
        logger.debug(f"Saved state to {self.path}")
        return self.path
