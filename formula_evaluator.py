"""Saneado, validación y evaluación de expresiones para la calculadora."""

import ast
import logging
import math
import operator
import re

logger = logging.getLogger(__name__)

MAX_EXPRESSION_LENGTH = 2000


class EvaluationError(ValueError):
    """La expresión no pudo evaluarse o su resultado no es un número finito."""


class PythonMathProvider:
    """Provee funciones y constantes matemáticas en un namespace cerrado."""

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

    def number(self, value):
        return float(value)

    def power(self, base, exponent):
        return base ** exponent

    def to_real(self, value) -> float:
        if isinstance(value, complex):
            raise ValueError("Resultado complejo")
        value = float(value)
        if not math.isfinite(value):
            raise ValueError("Resultado no finito")
        return value

    def build_namespace(self, answer=0.0) -> dict:
        mode = self._angle_mode

        def _trig(fn):
            def w(x):
                return fn(x * math.pi / 180 if mode == "deg" else x)

            return w

        return {
            "sin": _trig(math.sin),
            "cos": _trig(math.cos),
            "tan": _trig(math.tan),
            "log": math.log10,
            "ln": math.log,
            "sqrt": math.sqrt,
            "PI": math.pi,
            "E": math.e,
            "Ans": self.number(answer),
        }


class ExpressionSanitizer:
    """Limpia la entrada cruda antes de entregarla al evaluador.

    Cada paso es una función total sobre cadenas; no se valida la
    sintaxis aquí. Sanear una cadena ya saneada la deja igual.
    """

    _WHITESPACE = re.compile(r"\s+")
    _DISALLOWED_CHARS = re.compile(r"[^0-9+\-*/^().%A-Za-z]")
    _PERCENT_LITERAL = re.compile(r"(\d+(?:\.\d+)?)%")

    def sanitize(self, raw) -> str:
        expr = self._WHITESPACE.sub("", raw or "")
        expr = self._DISALLOWED_CHARS.sub("", expr)
        expr = expr.replace("^", "**")
        return self._replace_percentage(expr)

    @classmethod
    def _replace_percentage(cls, expr: str) -> str:
        return cls._PERCENT_LITERAL.sub(r"(\1/100)", expr)


class FormulaEvaluator:
    """Interpreta expresiones saneadas contra una tabla de símbolos cerrada."""

    FUNCTION_IDENTIFIERS = frozenset({"sin", "cos", "tan", "log", "ln", "sqrt"})
    CONSTANT_IDENTIFIERS = frozenset({"PI", "E", "Ans"})

    _BIN_OPS = {
        ast.Add: operator.add,
        ast.Sub: operator.sub,
        ast.Mult: operator.mul,
        ast.Div: operator.truediv,
    }

    _UNARY_OPS = {
        ast.UAdd: operator.pos,
        ast.USub: operator.neg,
    }

    def __init__(self, provider):
        self._provider = provider

    def evaluate(self, expression: str, answer=0.0):
        """Evalúa una expresión ya saneada y devuelve un valor real finito.

        Raises:
            EvaluationError: sintaxis inválida, identificador no permitido,
                error aritmético o resultado no finito. Las causas no se
                distinguen para el llamador.
        """
        if not expression or not expression.strip():
            raise EvaluationError("Expresión vacía")
        if len(expression) > MAX_EXPRESSION_LENGTH:
            logger.debug("Expresión de %d caracteres rechazada", len(expression))
            raise EvaluationError(
                f"Expresión demasiado larga (límite: {MAX_EXPRESSION_LENGTH} caracteres)"
            )

        namespace = self._provider.build_namespace(answer)

        try:
            tree = ast.parse(expression, mode="eval")
            value = self._eval(tree.body, namespace)
            return self._provider.to_real(value)
        except (SyntaxError, MemoryError) as exc:
            logger.debug("Error de sintaxis en %r: %s", expression, getattr(exc, "msg", exc))
            raise EvaluationError("Error de sintaxis") from exc
        except (ValueError, TypeError, ArithmeticError, RecursionError) as exc:
            logger.debug("No se pudo evaluar %r: %s", expression, exc)
            raise EvaluationError(str(exc) or type(exc).__name__) from exc

    def _eval(self, node: ast.AST, namespace: dict):
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
                raise ValueError("Solo se permiten literales numéricos")
            return self._provider.number(node.value)

        if isinstance(node, ast.Name):
            if node.id not in self.CONSTANT_IDENTIFIERS:
                raise ValueError(f"Identificador no permitido: {node.id}")
            return namespace[node.id]

        if isinstance(node, ast.BinOp):
            if isinstance(node.op, ast.Pow):
                # El proveedor acota el tamaño de la potencia
                op = self._provider.power
            else:
                op = self._BIN_OPS.get(type(node.op))
            if op is None:
                raise ValueError(f"Operador no permitido: {type(node.op).__name__}")
            return op(self._eval(node.left, namespace), self._eval(node.right, namespace))

        if isinstance(node, ast.UnaryOp):
            op = self._UNARY_OPS.get(type(node.op))
            if op is None:
                raise ValueError(f"Operador no permitido: {type(node.op).__name__}")
            return op(self._eval(node.operand, namespace))

        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name):
                raise ValueError("Solo se permiten llamadas directas")
            name = node.func.id
            if name not in self.FUNCTION_IDENTIFIERS:
                raise ValueError(f"Función no permitida: {name}")
            if node.keywords or len(node.args) != 1:
                raise ValueError(f"{name} requiere exactamente un argumento")
            return namespace[name](self._eval(node.args[0], namespace))

        raise ValueError(f"Expresión no soportada: {type(node).__name__}")
