from calculator_controller import CalculatorController
from calculator_engine import CalculatorEngine
from calculator_session import CalculatorSession
from formula_evaluator import EvaluationError, PythonMathProvider
from mpmath_engine import MPMathCalculatorEngine
import sys


def _engines():
	return [
		("float", lambda mode: CalculatorEngine(PythonMathProvider(mode))),
		("mpmath", lambda mode: MPMathCalculatorEngine(angle_mode=mode)),
	]


def _outcome(engine, expr: str, answer=None) -> str:
	try:
		value = engine.evaluate(expr, answer=answer)
	except EvaluationError:
		return "Error"
	if value is None:
		return "Empty"
	return engine.format_result(value)


def _play(*commands) -> tuple[CalculatorController, list[int]]:
	"""Reproduce una secuencia de comandos 'kind:name' y cuenta errores."""
	controller = CalculatorController(CalculatorSession())
	errors: list[int] = []
	controller.on_error(lambda: errors.append(1))
	for command in commands:
		kind, _, name = command.partition(":")
		if kind == "token":
			controller.on_token(name)
		elif kind == "function":
			controller.on_function(name)
		else:
			controller.on_action(name)
	return controller, errors


def inspect_expression(expr: str, *, mode: str = "deg", answer: float = 0.0) -> None:
	"""Imprime el saneado y el resultado en ambos motores."""
	print("Expression inspection")
	print(f"expr:           {expr}")
	print(f"angle mode:     {mode}")
	print(f"answer:         {answer}")
	for label, factory in _engines():
		engine = factory(mode)
		print(f"{label + ':':<16}{engine.sanitize(expr)!r} -> {_outcome(engine, expr, answer)}")


def run_regressions() -> None:
	checks: list[tuple[str, bool]] = []
	expected_actual: list[tuple[str, str, str]] = []

	for label, factory in _engines():
		deg = factory("deg")
		rad = factory("rad")
		cases = [
			(deg, "2+2", "4"),
			(deg, "sin(30)", "0.5"),
			(rad, "sin(PI/2)", "1"),
			(deg, "50%", "0.5"),
			(deg, "1/0", "Error"),
			(deg, "", "Empty"),
			(deg, "sqrt(-1)", "Error"),
			(deg, "log(1000)", "3"),
			(deg, "ln(E)", "1"),
			(deg, "(3+2)%", "Error"),
			(deg, "0.1+0.2", "0.3"),
			(deg, "2^10", "1024"),
			(deg, "foo(2)", "Error"),
			(deg, "__import__('os')", "Error"),
		]
		for engine, expr, expected in cases:
			actual = _outcome(engine, expr)
			expected_actual.append((f"[{label}] {expr!r}", expected, actual))
			checks.append((f"[{label}] {expr!r} evaluates to {expected}", actual == expected))

	controller, _ = _play("token:3", "token:+", "token:-")
	checks.append((
		"operator after operator replaces it",
		controller.display_state().expression_line == "3-",
	))

	controller, _ = _play("token:3", "action:dot", "token:5", "token:+", "token:2", "action:dot", "action:dot")
	checks.append((
		"second dot in a segment is ignored",
		controller.display_state().expression_line == "3.5+2.",
	))

	controller, errors = _play("token:1", "token:/", "token:0", "action:equals")
	checks.append(("failed equals fires error hook once", len(errors) == 1))
	checks.append(("failed equals keeps buffer", controller.display_state().main_line == "1/0"))
	checks.append(("failed equals leaves history empty", controller.get_history() == ()))

	controller, errors = _play("token:6", "token:*", "token:7", "action:equals", "token:+", "function:ans", "action:equals")
	expected_actual.append(("6*7 then +Ans", "84", controller.display_state().main_line))
	checks.append(("Ans chains the previous result", controller.display_state().main_line == "84"))
	checks.append(("two commits give two history entries", len(controller.get_history()) == 2))

	controller, _ = _play(*(["action:clear", "token:7", "action:equals"] * 21))
	checks.append(("history keeps 20 entries", len(controller.get_history()) == 20))

	failed = [name for name, ok in checks if not ok]
	for name, ok in checks:
		print(f"{name}: {'OK' if ok else 'FAIL'}")

	print("\nExpected vs Actual:")
	for label, expected, actual in expected_actual:
		status = "OK" if expected == actual else "FAIL"
		print(f"- {label}: {status}")
		print(f"  expected: {expected}")
		print(f"  actual:   {actual}")

	if failed:
		print("\nFAILED CHECKS:")
		for name in failed:
			print(f"- {name}")
		raise SystemExit(1)

	print("\nAll regression checks passed.")


if __name__ == "__main__":
	# Uso rápido:
	#   python regression_engine_checks.py
	#   python regression_engine_checks.py --inspect "sin(30)"
	#   python regression_engine_checks.py --inspect "sin(PI/2)" --mode rad --ans 2
	if "--inspect" in sys.argv:
		try:
			expr = sys.argv[sys.argv.index("--inspect") + 1]
		except (ValueError, IndexError):
			raise SystemExit("Missing expression after --inspect")

		def _read_option(flag: str, default: str) -> str:
			if flag not in sys.argv:
				return default
			idx = sys.argv.index(flag)
			try:
				return sys.argv[idx + 1]
			except IndexError:
				raise SystemExit(f"Missing value for {flag}")

		try:
			answer = float(_read_option("--ans", "0"))
		except ValueError:
			raise SystemExit("Invalid value for --ans")

		inspect_expression(
			expr,
			mode=_read_option("--mode", "deg"),
			answer=answer,
		)
	else:
		run_regressions()
