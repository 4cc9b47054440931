"""Estado de una sesión de la calculadora y sus transiciones.

La sesión es el único dueño del buffer de expresión, del último
resultado (Ans) y del historial. Cada operación se ejecuta completa y
de forma síncrona; tras cualquier operación se descarta el texto que
se haya escrito directamente sobre la pantalla principal.
"""

import logging
import re
from typing import Callable, NamedTuple

from calculation_history import HistoryLedger
from calculator_engine import CalculatorEngine
from formula_evaluator import EvaluationError

logger = logging.getLogger(__name__)


class DisplayState(NamedTuple):
    expression_line: str
    main_line: str


class CalculatorSession:
    """Buffer, Ans y modo angular de una sesión independiente."""

    BINARY_OPERATORS = frozenset("+-*/^")
    FUNCTION_CALLS = ("sin", "cos", "tan", "log", "ln", "sqrt")
    CONSTANTS = {"pi": "PI", "e": "E"}
    ANS_IDENTIFIER = "Ans"

    _SEGMENT_SEPARATORS = re.compile(r"[+\-*/^()]")

    def __init__(self, engine=None, history: HistoryLedger | None = None):
        self.engine = engine if engine is not None else CalculatorEngine()
        self.history = history if history is not None else HistoryLedger()
        self.buffer = ""
        self.last_answer: float | None = None
        self._display_override: str | None = None
        self._error_listeners: list[Callable[[], None]] = []

    # ── Pantalla ─────────────────────────────────────────────────

    @property
    def main_line(self) -> str:
        if self._display_override is not None:
            return self._display_override
        return self.buffer or "0"

    def display_state(self) -> DisplayState:
        return DisplayState(self.buffer or " ", self.main_line)

    def overwrite_display(self, text: str):
        """Texto escrito directamente en la pantalla principal."""
        self._display_override = text

    def _render(self) -> DisplayState:
        self._display_override = None
        return self.display_state()

    # ── Modo angular ─────────────────────────────────────────────

    @property
    def angle_mode(self) -> str:
        return self.engine.angle_mode

    def toggle_angle_mode(self) -> str:
        self.engine.angle_mode = "rad" if self.engine.angle_mode == "deg" else "deg"
        return self.engine.angle_mode.upper()

    # ── Aviso de error ───────────────────────────────────────────

    def subscribe_errors(self, callback: Callable[[], None]):
        self._error_listeners.append(callback)

    def unsubscribe_errors(self, callback: Callable[[], None]):
        if callback in self._error_listeners:
            self._error_listeners.remove(callback)

    def _emit_error(self):
        for callback in list(self._error_listeners):
            callback()

    # ── Edición del buffer ───────────────────────────────────────

    def append(self, token: str) -> DisplayState:
        # Carácter a carácter para que nunca queden dos operadores seguidos
        for char in str(token):
            is_op = char in self.BINARY_OPERATORS
            if is_op and (not self.buffer or self.buffer[-1] in self.BINARY_OPERATORS):
                self.buffer = self.buffer[:-1] + char
            else:
                self.buffer += char
        return self._render()

    def delete_last(self) -> DisplayState:
        self.buffer = self.buffer[:-1]
        return self._render()

    def clear(self) -> DisplayState:
        self.buffer = ""
        return self._render()

    def insert_function_call(self, name: str) -> DisplayState:
        if name not in self.FUNCTION_CALLS:
            raise ValueError(f"Función desconocida: {name}")
        self.buffer += f"{name}("
        return self._render()

    def insert_constant(self, name: str) -> DisplayState:
        if name not in self.CONSTANTS:
            raise ValueError(f"Constante desconocida: {name}")
        return self.append(self.CONSTANTS[name])

    def insert_ans(self) -> DisplayState:
        if self.last_answer is None:
            return self._render()
        return self.append(self.ANS_IDENTIFIER)

    def square(self) -> DisplayState:
        if self.buffer:
            self.buffer = f"({self.buffer})^2"
        return self._render()

    def insert_dot(self) -> DisplayState:
        segment = self._SEGMENT_SEPARATORS.split(self.buffer)[-1]
        if "." in segment:
            return self._render()
        return self.append(".")

    def insert_double_zero(self) -> DisplayState:
        return self.append("00" if self.buffer else "0")

    def insert_percent(self) -> DisplayState:
        return self.append("%")

    # ── Evaluación ───────────────────────────────────────────────

    def commit(self) -> bool:
        """Evalúa el buffer (o la pantalla si está vacío).

        Ans, buffer e historial solo cambian, y juntos, si la
        evaluación tiene éxito. Un fallo notifica a los suscriptores
        de error una sola vez y deja el estado intacto.
        """
        expression = self.buffer if self.buffer else self.main_line

        try:
            result = self.engine.evaluate(expression, answer=self.last_answer)
        except EvaluationError as exc:
            logger.debug("Fallo al evaluar %r: %s", expression, exc)
            self._render()
            self._emit_error()
            return False

        if result is None:
            self._render()
            return False

        self.history.push(expression.strip(), result)
        self.last_answer = result
        self.buffer = self.engine.format_result(result)
        logger.debug("%r = %s", expression, self.buffer)
        self._render()
        return True

    # ── Historial ────────────────────────────────────────────────

    def select_history(self, index: int) -> str:
        """Reutiliza el resultado de una entrada sin recalcularlo."""
        entry = self.history.select(index)
        if entry is not None:
            self.buffer = self.engine.format_result(entry.result)
        self._render()
        return self.buffer

    def clear_history(self):
        self.history.clear()
