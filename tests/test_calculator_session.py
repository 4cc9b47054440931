import unittest

from calculation_history import HistoryEntry, HistoryLedger
from calculator_session import CalculatorSession, DisplayState


class SessionTestCase(unittest.TestCase):
    def setUp(self):
        self.session = CalculatorSession()
        self.errors = []
        self.session.subscribe_errors(lambda: self.errors.append(1))

    def type_in(self, text):
        return self.session.append(text)


class TestAppend(SessionTestCase):
    def test_operator_replaces_trailing_operator(self):
        self.type_in("3+")
        self.session.append("-")
        self.assertEqual(self.session.buffer, "3-")

    def test_leading_operator_is_kept(self):
        self.session.append("-")
        self.assertEqual(self.session.buffer, "-")
        self.session.append("+")
        self.assertEqual(self.session.buffer, "+")

    def test_multi_character_tokens_go_through_the_guard(self):
        self.session.append("3+-*2")
        self.assertEqual(self.session.buffer, "3*2")

    def test_non_operators_concatenate(self):
        self.type_in("(2)")
        self.session.append("PI")
        self.assertEqual(self.session.buffer, "(2)PI")

    def test_returns_display_state(self):
        self.assertEqual(self.type_in("12"), DisplayState("12", "12"))


class TestEditing(SessionTestCase):
    def test_delete_last(self):
        self.type_in("12")
        self.session.delete_last()
        self.assertEqual(self.session.buffer, "1")
        self.session.delete_last()
        self.session.delete_last()
        self.assertEqual(self.session.buffer, "")

    def test_clear(self):
        self.type_in("12+3")
        self.assertEqual(self.session.clear(), DisplayState(" ", "0"))

    def test_function_call_opens_parenthesis(self):
        self.session.insert_function_call("sqrt")
        self.assertEqual(self.session.buffer, "sqrt(")
        with self.assertRaises(ValueError):
            self.session.insert_function_call("exp")

    def test_constants(self):
        self.session.insert_constant("pi")
        self.session.append("*")
        self.session.insert_constant("e")
        self.assertEqual(self.session.buffer, "PI*E")

    def test_square(self):
        self.session.square()
        self.assertEqual(self.session.buffer, "")
        self.type_in("3+4")
        self.session.square()
        self.assertEqual(self.session.buffer, "(3+4)^2")

    def test_dot_once_per_segment(self):
        self.type_in("3.5+2")
        self.session.insert_dot()
        self.assertEqual(self.session.buffer, "3.5+2.")
        self.session.insert_dot()
        self.assertEqual(self.session.buffer, "3.5+2.")

    def test_dot_on_empty_buffer_and_after_parenthesis(self):
        self.session.insert_dot()
        self.assertEqual(self.session.buffer, ".")
        self.session.clear()
        self.type_in("sin(1.5)")
        self.session.insert_dot()
        self.assertEqual(self.session.buffer, "sin(1.5).")

    def test_double_zero(self):
        self.session.insert_double_zero()
        self.assertEqual(self.session.buffer, "0")
        self.session.clear()
        self.type_in("1")
        self.session.insert_double_zero()
        self.assertEqual(self.session.buffer, "100")

    def test_percent(self):
        self.type_in("50")
        self.session.insert_percent()
        self.assertEqual(self.session.buffer, "50%")

    def test_ans_requires_previous_result(self):
        self.session.insert_ans()
        self.assertEqual(self.session.buffer, "")
        self.type_in("2")
        self.session.commit()
        self.session.append("*")
        self.session.insert_ans()
        self.assertEqual(self.session.buffer, "2*Ans")


class TestCommit(SessionTestCase):
    def test_success_updates_everything_together(self):
        self.type_in("2+2")
        self.assertTrue(self.session.commit())
        self.assertEqual(self.session.buffer, "4")
        self.assertEqual(self.session.last_answer, 4)
        self.assertEqual(self.session.history.entries(), (HistoryEntry("2+2", 4.0),))
        self.assertEqual(self.errors, [])

    def test_degree_trig(self):
        self.session.insert_function_call("sin")
        self.type_in("30)")
        self.session.commit()
        self.assertEqual(self.session.buffer, "0.5")

    def test_failure_changes_nothing_and_fires_once(self):
        self.type_in("2")
        self.session.commit()
        self.type_in("/0")
        self.assertFalse(self.session.commit())
        self.assertEqual(self.errors, [1])
        self.assertEqual(self.session.buffer, "2/0")
        self.assertEqual(self.session.last_answer, 2)
        self.assertEqual(len(self.session.history), 1)

    def test_unknown_identifier_is_an_error(self):
        self.type_in("abc+1")
        self.assertFalse(self.session.commit())
        self.assertEqual(self.errors, [1])
        self.assertEqual(self.session.buffer, "abc+1")

    def test_empty_after_sanitizing_is_a_silent_no_op(self):
        self.type_in("  ")
        self.assertFalse(self.session.commit())
        self.assertEqual(self.errors, [])
        self.assertEqual(self.session.buffer, "  ")
        self.assertIsNone(self.session.last_answer)
        self.assertEqual(len(self.session.history), 0)

    def test_history_stores_trimmed_expression(self):
        self.type_in(" 2+3 ")
        self.assertTrue(self.session.commit())
        self.assertEqual(self.session.history.entries(), (HistoryEntry("2+3", 5.0),))

    def test_deeply_nested_display_text_is_recovered(self):
        self.session.overwrite_display("-" * 50000 + "1")
        self.assertFalse(self.session.commit())
        self.assertEqual(self.errors, [1])
        self.assertEqual(self.session.buffer, "")
        self.assertIsNone(self.session.last_answer)
        self.assertEqual(len(self.session.history), 0)

    def test_empty_buffer_falls_back_to_display(self):
        self.session.overwrite_display("5*5")
        self.assertEqual(self.session.display_state(), DisplayState(" ", "5*5"))
        self.assertTrue(self.session.commit())
        self.assertEqual(self.session.buffer, "25")
        self.assertEqual(self.session.history.select(0), HistoryEntry("5*5", 25.0))

    def test_empty_buffer_evaluates_the_zero_on_screen(self):
        self.assertTrue(self.session.commit())
        self.assertEqual(self.session.buffer, "0")
        self.assertEqual(self.session.history.entries(), (HistoryEntry("0", 0.0),))

    def test_display_override_is_dropped_on_next_operation(self):
        self.session.overwrite_display("99")
        self.session.append("1")
        self.assertEqual(self.session.main_line, "1")

    def test_ans_chains(self):
        self.type_in("6*7")
        self.session.commit()
        self.session.append("+")
        self.session.insert_ans()
        self.session.commit()
        self.assertEqual(self.session.buffer, "84")

    def test_rejected_history_entry_still_updates_answer(self):
        class NoHistory(HistoryLedger):
            def push(self, expression, result):
                return False

        session = CalculatorSession(history=NoHistory())
        session.append("3")
        self.assertTrue(session.commit())
        self.assertEqual(session.last_answer, 3)

    def test_unsubscribe(self):
        listener = self.session._error_listeners[0]
        self.session.unsubscribe_errors(listener)
        self.type_in("1/0")
        self.session.commit()
        self.assertEqual(self.errors, [])


class TestAngleModeAndHistory(SessionTestCase):
    def test_toggle_angle_mode(self):
        self.assertEqual(self.session.angle_mode, "deg")
        self.assertEqual(self.session.toggle_angle_mode(), "RAD")
        self.type_in("sin(PI/2)")
        self.session.commit()
        self.assertEqual(self.session.buffer, "1")
        self.assertEqual(self.session.toggle_angle_mode(), "DEG")

    def test_select_history_replays_without_evaluating(self):
        self.type_in("1/3")
        self.session.commit()
        self.session.clear()
        self.assertEqual(self.session.select_history(0), "0.3333333333")
        self.assertEqual(self.session.buffer, "0.3333333333")
        self.assertEqual(len(self.session.history), 1)

    def test_select_history_out_of_range_keeps_buffer(self):
        self.type_in("12")
        self.assertEqual(self.session.select_history(3), "12")

    def test_clear_history(self):
        self.type_in("1+1")
        self.session.commit()
        self.session.clear_history()
        self.assertEqual(len(self.session.history), 0)
        self.assertEqual(self.session.last_answer, 2)

    def test_sessions_are_independent(self):
        other = CalculatorSession()
        self.type_in("2+3")
        self.session.commit()
        self.session.toggle_angle_mode()
        self.assertEqual(other.buffer, "")
        self.assertIsNone(other.last_answer)
        self.assertEqual(other.angle_mode, "deg")


if __name__ == "__main__":
    unittest.main()
