"""
Motor de cálculo para la calculadora científica.

Este módulo provee la clase CalculatorEngine que sanea, evalúa y
redondea expresiones matemáticas. Está diseñado como módulo
independiente que puede ser reemplazado por implementaciones
alternativas (e.g., el motor basado en mpmath).

Contrato de interfaz:
    - evaluate(expression: str, answer: float | None) -> float | None
    - format_result(value: float) -> str
    - angle_mode: propiedad 'rad' | 'deg'
"""

import math

from formula_evaluator import ExpressionSanitizer, FormulaEvaluator, PythonMathProvider

RESULT_DECIMALS = 10


class CalculatorEngine:
    """Evalúa expresiones matemáticas con funciones científicas."""

    def __init__(self, provider=None, decimals: int = RESULT_DECIMALS):
        self._provider = provider if provider is not None else PythonMathProvider()
        self._sanitizer = ExpressionSanitizer()
        self._evaluator = FormulaEvaluator(self._provider)
        self._decimals = decimals

    # ── Propiedad: modo angular ──────────────────────────────────

    @property
    def angle_mode(self) -> str:
        return self._provider.angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        self._provider.angle_mode = mode

    # ── Evaluación principal ─────────────────────────────────────

    def sanitize(self, expression: str) -> str:
        return self._sanitizer.sanitize(expression)

    def evaluate(self, expression: str, answer: float | None = None) -> float | None:
        """Evalúa la expresión y devuelve el resultado redondeado.

        Devuelve None si tras el saneado no queda nada que evaluar.

        Raises:
            EvaluationError: expresión inválida o resultado no finito.
        """
        sanitized = self._sanitizer.sanitize(expression)
        if not sanitized:
            return None
        value = self._evaluator.evaluate(sanitized, answer=answer or 0.0)
        return self._round(value)

    def _round(self, value: float) -> float:
        rounded = round(value, self._decimals)
        # Evita mostrar "-0"
        return rounded if rounded != 0 else 0.0

    # ── Formato del resultado ────────────────────────────────────

    @staticmethod
    def format_result(value: float) -> str:
        if math.isfinite(value) and value == int(value) and abs(value) < 1e15:
            return str(int(value))
        return repr(float(value))
