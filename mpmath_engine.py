"""Motor de cálculo alternativo que evalúa con mpmath a precisión de trabajo."""

from __future__ import annotations

import math

from calculator_engine import CalculatorEngine, RESULT_DECIMALS

try:
    from mpmath import mp
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "mpmath no está instalado. Instala con: pip install mpmath"
    ) from exc


class MPMathProvider:
    """Proveedor matemático basado en mpmath con la misma tabla cerrada."""

    # Margen sobre los ~1024 bits de exponente de un double
    POWER_BIT_LIMIT = 1100

    def __init__(self, angle_mode: str = "deg"):
        self._angle_mode = "deg"
        self.angle_mode = angle_mode

    @property
    def angle_mode(self) -> str:
        return self._angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        if mode not in ("rad", "deg"):
            raise ValueError("El modo debe ser 'rad' o 'deg'")
        self._angle_mode = mode

    def _trig(self, fn):
        mode = self._angle_mode

        def wrapped(x):
            value = x * mp.pi / 180 if mode == "deg" else x
            return fn(value)

        return wrapped

    @staticmethod
    def number(value):
        # Los literales decimales se promueven desde su texto para no
        # arrastrar el error binario del float.
        if isinstance(value, float):
            return mp.mpf(repr(value))
        return mp.mpf(value)

    def power(self, base, exponent):
        """Potencia con el tamaño del resultado acotado al rango del double.

        Se estima log2|base**exponent| antes de calcular, para que las
        potencias apiladas fallen de inmediato en lugar de construir
        un número gigantesco.
        """
        if base == 0:
            return base ** exponent

        is_complex = isinstance(base, mp.mpc) or isinstance(exponent, mp.mpc)
        with mp.workprec(53):
            log_size = mp.log(abs(base), 2)
            bits = abs(exponent) * abs(log_size) if is_complex else exponent * log_size

        if bits > self.POWER_BIT_LIMIT:
            raise OverflowError("Potencia fuera del rango de doble precisión")
        if not is_complex and bits < -self.POWER_BIT_LIMIT:
            if base > 0 or mp.isint(exponent):
                return mp.mpf(0)
            raise ValueError("Resultado complejo")
        return base ** exponent

    @staticmethod
    def to_real(value) -> float:
        if isinstance(value, mp.mpc):
            raise ValueError("Resultado complejo")
        if not mp.isfinite(value):
            raise ValueError("Resultado no finito")
        result = float(value)
        if not math.isfinite(result):
            raise ValueError("Resultado fuera del rango de doble precisión")
        return result

    def build_namespace(self, answer=0.0) -> dict:
        return {
            "sin": self._trig(mp.sin),
            "cos": self._trig(mp.cos),
            "tan": self._trig(mp.tan),
            "log": mp.log10,
            "ln": mp.log,
            "sqrt": mp.sqrt,
            "PI": +mp.pi,
            "E": +mp.e,
            "Ans": self.number(answer),
        }


class MPMathCalculatorEngine(CalculatorEngine):
    """Evalúa con mpmath y normaliza el resultado a un double finito."""

    def __init__(
        self,
        working_digits: int = 30,
        decimals: int = RESULT_DECIMALS,
        angle_mode: str = "deg",
    ):
        super().__init__(provider=MPMathProvider(angle_mode), decimals=decimals)
        self._working_digits = max(16, working_digits)

    @property
    def working_digits(self) -> int:
        return self._working_digits

    def evaluate(self, expression: str, answer: float | None = None) -> float | None:
        with mp.workdps(self._working_digits):
            return super().evaluate(expression, answer)
