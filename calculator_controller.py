"""Frontera entre la interfaz y el motor de la calculadora.

La interfaz reenvía tokens, funciones y acciones por nombre; cada
llamada devuelve el nuevo estado de pantalla. El aviso de error se
expone como suscripción para que la interfaz decida cómo mostrarlo.
"""

import logging
from typing import Callable

from calculation_history import HistoryEntry
from calculator_session import CalculatorSession, DisplayState

logger = logging.getLogger(__name__)


# ── Atajos de teclado ────────────────────────────────────────────
#  Cada atajo se resuelve a (tipo, nombre); tipo es "token",
#  "function", "action" o "toggle".

TOKEN_KEYS = frozenset("0123456789+-*/^()")

KEYSYM_BINDINGS = {
    "Return":    ("action", "equals"),
    "KP_Enter":  ("action", "equals"),
    "BackSpace": ("action", "delete"),
    "Escape":    ("action", "clear"),
}

CHAR_BINDINGS = {
    "=": ("action", "equals"),
    ".": ("action", "dot"),
    "%": ("action", "percent"),
    "a": ("function", "ans"),
    "A": ("function", "ans"),
    "d": ("toggle", "angle"),
    "D": ("toggle", "angle"),
    "t": ("toggle", "theme"),
    "T": ("toggle", "theme"),
}


def resolve_key(char: str, keysym: str = "") -> tuple[str, str] | None:
    """Traduce una pulsación de teclado a un comando de la calculadora."""
    if keysym in KEYSYM_BINDINGS:
        return KEYSYM_BINDINGS[keysym]
    if char and char in TOKEN_KEYS:
        return ("token", char)
    return CHAR_BINDINGS.get(char)


class CalculatorController:
    """Despacha nombres de la interfaz a operaciones de la sesión."""

    def __init__(self, session: CalculatorSession | None = None):
        self.session = session if session is not None else CalculatorSession()

        self._functions: dict[str, Callable[[], DisplayState]] = {
            name: (lambda n=name: self.session.insert_function_call(n))
            for name in CalculatorSession.FUNCTION_CALLS
        }
        self._functions.update({
            "square": self.session.square,
            "pi":     lambda: self.session.insert_constant("pi"),
            "e":      lambda: self.session.insert_constant("e"),
            "ans":    self.session.insert_ans,
        })

        self._actions: dict[str, Callable[[], DisplayState]] = {
            "clear":       self.session.clear,
            "delete":      self.session.delete_last,
            "equals":      self._equals,
            "percent":     self.session.insert_percent,
            "dot":         self.session.insert_dot,
            "double-zero": self.session.insert_double_zero,
        }

    # ── Entrada ──────────────────────────────────────────────────

    def on_token(self, raw: str) -> DisplayState:
        return self.session.append(raw)

    def on_function(self, name: str) -> DisplayState:
        try:
            handler = self._functions[name]
        except KeyError:
            raise ValueError(f"Función desconocida: {name}") from None
        return handler()

    def on_action(self, name: str) -> DisplayState:
        try:
            handler = self._actions[name]
        except KeyError:
            raise ValueError(f"Acción desconocida: {name}") from None
        return handler()

    def on_toggle_angle_mode(self) -> str:
        label = self.session.toggle_angle_mode()
        logger.debug("Modo angular: %s", label)
        return label

    def on_error(self, callback: Callable[[], None]):
        self.session.subscribe_errors(callback)

    def display_state(self) -> DisplayState:
        return self.session.display_state()

    def _equals(self) -> DisplayState:
        self.session.commit()
        return self.session.display_state()

    # ── Historial ────────────────────────────────────────────────

    def get_history(self) -> tuple[HistoryEntry, ...]:
        return self.session.history.entries()

    def on_history_select(self, index: int) -> str:
        return self.session.select_history(index)

    def on_clear_history(self):
        self.session.clear_history()
