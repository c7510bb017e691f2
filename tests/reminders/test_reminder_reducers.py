import unittest

from reminders import DEFAULT_REMINDERS, ReminderOverride
from reminders import state
from reminders.constants import PROGRESS_MAX


def _board(now: float = 0.0, **overrides: ReminderOverride) -> state.ReminderBoard:
    return state.initial_board(DEFAULT_REMINDERS, now, overrides)


class InitialBoardTests(unittest.TestCase):
    def test_uses_catalog_defaults(self) -> None:
        board = _board(now=50.0)

        self.assertEqual(("eye", "micro", "hydration", "snack"), board.keys)
        eye = board.get("eye")
        self.assertIsNotNone(eye)
        assert eye is not None
        self.assertTrue(eye.enabled)
        self.assertEqual(20, eye.frequency_minutes)
        self.assertEqual(0.0, eye.progress)
        self.assertEqual(50.0, eye.last_triggered)
        snack = board.get("snack")
        assert snack is not None
        self.assertFalse(snack.enabled)

    def test_applies_overrides(self) -> None:
        board = _board(
            eye=ReminderOverride(enabled=False, frequency_minutes=30),
            snack=ReminderOverride(enabled=True),
        )

        eye = board.get("eye")
        snack = board.get("snack")
        assert eye is not None and snack is not None
        self.assertFalse(eye.enabled)
        self.assertEqual(30, eye.frequency_minutes)
        self.assertTrue(snack.enabled)
        self.assertEqual(120, snack.frequency_minutes)

    def test_rejects_override_outside_allowed_frequencies(self) -> None:
        with self.assertRaises(ValueError):
            _board(eye=ReminderOverride(frequency_minutes=17))

    def test_rejects_duplicate_keys(self) -> None:
        with self.assertRaises(ValueError):
            state.initial_board(DEFAULT_REMINDERS + DEFAULT_REMINDERS[:1], 0.0)


class ReducerTests(unittest.TestCase):
    def test_set_enabled_restarts_countdown(self) -> None:
        board = state.tick(_board(now=0.0), 600.0).board

        updated = state.set_enabled(board, "eye", False, 700.0)

        eye = updated.get("eye")
        assert eye is not None
        self.assertFalse(eye.enabled)
        self.assertEqual(0.0, eye.progress)
        self.assertEqual(700.0, eye.last_triggered)

    def test_set_enabled_unknown_key_returns_same_board(self) -> None:
        board = _board()
        self.assertIs(board, state.set_enabled(board, "posture", True, 10.0))

    def test_set_frequency_updates_and_restarts(self) -> None:
        board = state.tick(_board(now=0.0), 300.0).board

        updated = state.set_frequency(board, "eye", 25, 400.0)

        eye = updated.get("eye")
        assert eye is not None
        self.assertEqual(25, eye.frequency_minutes)
        self.assertEqual(0.0, eye.progress)
        self.assertEqual(400.0, eye.last_triggered)

    def test_set_frequency_rejects_disallowed_value(self) -> None:
        board = _board()
        with self.assertRaises(ValueError):
            state.set_frequency(board, "hydration", 20, 1.0)

    def test_set_frequency_unknown_key_returns_same_board(self) -> None:
        board = _board()
        self.assertIs(board, state.set_frequency(board, "posture", 20, 1.0))

    def test_reset_all_restarts_every_reminder_including_disabled(self) -> None:
        board = state.tick(_board(now=0.0), 900.0).board

        reset = state.reset_all(board, 1000.0)

        for reminder in reset:
            self.assertEqual(0.0, reminder.progress)
            self.assertEqual(1000.0, reminder.last_triggered)

    def test_trigger_skips_disabled_and_unknown(self) -> None:
        board = _board()

        self.assertEqual((board, None), state.trigger(board, "snack", 5.0))
        self.assertEqual((board, None), state.trigger(board, "posture", 5.0))

    def test_trigger_resets_enabled_reminder(self) -> None:
        board = _board()

        updated, fired = state.trigger(board, "micro", 42.0)

        assert fired is not None
        self.assertEqual("micro", fired.key)
        self.assertEqual(42.0, fired.last_triggered)
        self.assertEqual(fired, updated.get("micro"))


class TickTests(unittest.TestCase):
    def test_eye_reminder_before_threshold_reports_progress_without_firing(self) -> None:
        now = 10_000.0
        board = _board(now=now - 19 * 60)

        result = state.tick(board, now)

        eye = result.board.get("eye")
        assert eye is not None
        self.assertAlmostEqual(95.0, eye.progress, places=6)
        self.assertEqual((), tuple(r.key for r in result.fired if r.key == "eye"))

    def test_eye_reminder_past_threshold_fires_and_commits_zero(self) -> None:
        now = 10_000.0
        board = _board(now=now - (20 * 60 + 1))

        result = state.tick(board, now)

        eye = result.board.get("eye")
        assert eye is not None
        self.assertIn("eye", [reminder.key for reminder in result.fired])
        self.assertEqual(0.0, eye.progress)
        self.assertEqual(now, eye.last_triggered)

    def test_disabled_reminder_reports_zero_regardless_of_elapsed(self) -> None:
        board = _board(now=0.0)

        for now in (60.0, 3600.0, 86_400.0):
            result = state.tick(board, now)
            snack = result.board.get("snack")
            assert snack is not None
            self.assertEqual(0.0, snack.progress)
            self.assertNotIn("snack", [reminder.key for reminder in result.fired])

    def test_many_elapsed_periods_fire_only_once(self) -> None:
        board = _board(now=0.0)

        first = state.tick(board, 5 * 20 * 60.0)
        second = state.tick(first.board, 5 * 20 * 60.0 + 1.0)

        self.assertEqual(1, [reminder.key for reminder in first.fired].count("eye"))
        self.assertNotIn("eye", [reminder.key for reminder in second.fired])

    def test_progress_is_monotonic_and_bounded_between_resets(self) -> None:
        board = _board(now=0.0)
        previous = -1.0

        for second in range(0, 20 * 60, 37):
            board = state.tick(board, float(second)).board
            eye = board.get("eye")
            assert eye is not None
            self.assertGreaterEqual(eye.progress, previous)
            self.assertGreaterEqual(eye.progress, 0.0)
            self.assertLessEqual(eye.progress, PROGRESS_MAX)
            previous = eye.progress

    def test_clock_going_backwards_clamps_elapsed_to_zero(self) -> None:
        board = _board(now=100.0)

        result = state.tick(board, 50.0)

        eye = result.board.get("eye")
        assert eye is not None
        self.assertEqual(0.0, eye.progress)
        self.assertEqual((), result.fired)

    def test_seconds_until_due(self) -> None:
        board = _board(now=0.0)
        eye = board.get("eye")
        snack = board.get("snack")
        assert eye is not None and snack is not None

        self.assertEqual(20 * 60 - 90.0, eye.seconds_until_due(90.0))
        self.assertIsNone(snack.seconds_until_due(90.0))


if __name__ == "__main__":
    unittest.main()
