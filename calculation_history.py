"""Historial acotado de cálculos realizados con éxito."""

import logging
import math
from collections import deque
from dataclasses import dataclass
from numbers import Real

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 20


@dataclass(frozen=True)
class HistoryEntry:
    """Par (expresión, resultado) inmutable."""

    expression: str
    result: float

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"


class HistoryLedger:
    """Registro ordenado del más reciente al más antiguo.

    Al superar el límite se descarta la entrada más antigua. No se
    eliminan entradas sueltas ni se deduplican.
    """

    def __init__(self, limit: int = HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("El límite del historial debe ser positivo")
        self._entries: deque[HistoryEntry] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._entries.maxlen

    def push(self, expression: str, result) -> bool:
        """Inserta al frente; devuelve False si la entrada no es válida."""
        if not expression or not expression.strip():
            return False
        if isinstance(result, bool) or not isinstance(result, Real):
            return False
        if not math.isfinite(result):
            return False

        self._entries.appendleft(HistoryEntry(expression, float(result)))
        return True

    def select(self, index: int) -> HistoryEntry | None:
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def clear(self):
        logger.info("Historial vaciado (%d entradas)", len(self._entries))
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))
