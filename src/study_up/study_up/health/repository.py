from __future__ import annotations

from typing import Any, Dict, List, Protocol


class HealthRepository(Protocol):
    def ping(self) -> List[Dict[str, Any]]:
        """Rows of a trivial query; raises when the database is unreachable."""

        raise NotImplementedError

    def list_recipes(self) -> List[Dict[str, Any]]:
        raise NotImplementedError
