"""Configuración de la calculadora, sobrescribible con variables de entorno."""

import logging
import os
from dataclasses import dataclass

from calculation_history import HISTORY_LIMIT
from calculator_engine import RESULT_DECIMALS

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class CalculatorSettings:
    angle_mode: str = "deg"            # "deg" o "rad"
    history_limit: int = HISTORY_LIMIT
    result_decimals: int = RESULT_DECIMALS
    use_mpmath: bool = False
    mpmath_digits: int = 30
    log_level: str = "WARNING"
    error_flash_ms: int = 200
    button_flash_ms: int = 90

    @classmethod
    def from_env(cls, environ=None) -> "CalculatorSettings":
        env = os.environ if environ is None else environ
        try:
            settings = cls(
                angle_mode=env.get("CALC_ANGLE_MODE", "deg").strip().lower(),
                history_limit=int(env.get("CALC_HISTORY_LIMIT", str(HISTORY_LIMIT))),
                result_decimals=int(env.get("CALC_RESULT_DECIMALS", str(RESULT_DECIMALS))),
                use_mpmath=env.get("CALC_USE_MPMATH", "0").strip().lower() in _TRUE_VALUES,
                mpmath_digits=int(env.get("CALC_MPMATH_DIGITS", "30")),
                log_level=env.get("CALC_LOG_LEVEL", "WARNING").strip().upper(),
            )
        except ValueError as exc:
            raise ValueError(f"Configuración inválida: {exc}") from exc
        settings.validate()
        return settings

    def validate(self):
        if self.angle_mode not in {"deg", "rad"}:
            raise ValueError("angle_mode debe ser 'deg' o 'rad'")
        if self.history_limit < 1:
            raise ValueError("history_limit debe ser al menos 1")
        if not (0 <= self.result_decimals <= 15):
            raise ValueError("result_decimals debe estar entre 0 y 15")
        if self.mpmath_digits < 16:
            raise ValueError("mpmath_digits debe ser al menos 16")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Nivel de log desconocido: {self.log_level}")


def configure_logging(settings: CalculatorSettings):
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
