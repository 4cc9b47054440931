"""Punto de entrada de la calculadora científica."""

import logging

from calculation_history import HistoryLedger
from calculator_config import CalculatorSettings, configure_logging
from calculator_controller import CalculatorController
from calculator_engine import CalculatorEngine
from calculator_session import CalculatorSession
from formula_evaluator import PythonMathProvider

logger = logging.getLogger(__name__)


def build_engine(settings: CalculatorSettings):
    if settings.use_mpmath:
        from mpmath_engine import MPMathCalculatorEngine

        return MPMathCalculatorEngine(
            working_digits=settings.mpmath_digits,
            decimals=settings.result_decimals,
            angle_mode=settings.angle_mode,
        )
    return CalculatorEngine(
        PythonMathProvider(settings.angle_mode),
        decimals=settings.result_decimals,
    )


def build_controller(settings: CalculatorSettings) -> CalculatorController:
    session = CalculatorSession(
        engine=build_engine(settings),
        history=HistoryLedger(settings.history_limit),
    )
    return CalculatorController(session)


def main():
    settings = CalculatorSettings.from_env()
    configure_logging(settings)
    logger.info("Motor: %s", "mpmath" if settings.use_mpmath else "float")

    import tkinter as tk
    from calculator_ui import CalculatorApp

    root = tk.Tk()
    root.minsize(360, 560)
    CalculatorApp(root, controller=build_controller(settings), settings=settings)
    root.mainloop()


if __name__ == "__main__":
    main()
