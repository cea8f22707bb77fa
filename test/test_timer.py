import unittest

from pomobar.timer import (
    CYCLES_PER_LONG_BREAK,
    FOCUS_DURATION,
    LONG_BREAK_DURATION,
    SHORT_BREAK_DURATION,
    Phase,
    PomodoroTimer,
    format_clock,
)


def finish_phase(timer, now):
    timer.start(now)
    return timer.current_status(now + timer.total_time + 1)


class PomodoroTimerTests(unittest.TestCase):
    def test_fresh_timer_defaults(self):
        timer = PomodoroTimer()
        self.assertEqual(timer.phase, Phase.FOCUS)
        self.assertEqual(timer.total_time, FOCUS_DURATION)
        self.assertFalse(timer.is_running)
        self.assertTrue(timer.is_fresh)

    def test_start_reports_full_focus(self):
        timer = PomodoroTimer()
        timer.start(now=100.0)
        status = timer.current_status(100.0)
        self.assertEqual(status.to_json(), '{"elapsed_time":"00:00","text":"25:00"}')
        self.assertTrue(status.is_running)
        self.assertFalse(timer.is_fresh)

    def test_entered_break_is_not_fresh(self):
        timer = PomodoroTimer()
        timer.start(now=0.0)
        timer.current_status(1501.0)
        self.assertEqual(timer.phase, Phase.SHORT_BREAK)
        self.assertIsNone(timer.start_instant)
        self.assertFalse(timer.is_fresh)

    def test_start_is_noop_while_running(self):
        timer = PomodoroTimer()
        timer.start(now=0.0)
        timer.start(now=50.0)
        self.assertEqual(timer.start_instant, 0.0)
        self.assertEqual(timer.current_status(60.0).elapsed_seconds, 60)

    def test_elapsed_grows_while_running_and_freezes_on_pause(self):
        timer = PomodoroTimer()
        timer.start(now=10.0)
        seen = [timer.current_status(t).elapsed_seconds for t in (10.0, 11.5, 15.0, 70.0)]
        self.assertEqual(seen, sorted(seen))
        timer.pause(now=70.0)
        self.assertEqual(timer.current_status(500.0).elapsed_seconds, 60)
        self.assertEqual(timer.current_status(900.0).elapsed_seconds, 60)

    def test_pause_then_start_keeps_remaining(self):
        timer = PomodoroTimer()
        timer.start(now=0.0)
        before = timer.current_status(125.0)
        timer.pause(now=125.0)
        timer.start(now=125.0)
        after = timer.current_status(125.0)
        self.assertEqual(before.remaining_seconds, after.remaining_seconds)
        self.assertEqual(after.to_dict()["text"], "22:55")

    def test_resume_moves_deadline(self):
        timer = PomodoroTimer()
        timer.start(now=0.0)
        self.assertEqual(timer.end_instant, FOCUS_DURATION)
        timer.pause(now=100.0)
        timer.start(now=200.0)
        self.assertEqual(timer.start_instant, 200.0)
        self.assertEqual(timer.end_instant, 200.0 + FOCUS_DURATION)
        self.assertEqual(timer.current_status(250.0).elapsed_seconds, 150)

    def test_pause_is_noop_when_not_running(self):
        timer = PomodoroTimer()
        timer.pause(now=10.0)
        self.assertEqual(timer.elapsed_time, 0)
        self.assertTrue(timer.is_fresh)

    def test_toggle_starts_and_pauses(self):
        timer = PomodoroTimer()
        timer.toggle(now=0.0)
        self.assertTrue(timer.is_running)
        timer.toggle(now=30.0)
        self.assertFalse(timer.is_running)
        self.assertEqual(timer.elapsed_time, 30.0)

    def test_clock_going_backwards_never_underflows(self):
        timer = PomodoroTimer()
        timer.start(now=100.0)
        status = timer.current_status(40.0)
        self.assertEqual(status.elapsed_seconds, 0)
        self.assertEqual(status.remaining_seconds, FOCUS_DURATION)

    def test_exact_duration_is_not_a_boundary(self):
        timer = PomodoroTimer()
        timer.start(now=0.0)
        status = timer.current_status(float(FOCUS_DURATION))
        self.assertIsNone(status.transition)
        self.assertEqual(status.to_dict(), {"elapsed_time": "25:00", "text": "00:00"})

    def test_focus_completion_enters_short_break(self):
        timer = PomodoroTimer()
        timer.start(now=0.0)
        status = timer.current_status(1501.0)
        self.assertEqual(status.to_json(), '{"elapsed_time":"00:00","text":"05:00"}')
        self.assertEqual(status.transition, Phase.SHORT_BREAK)
        self.assertEqual(timer.cycles_completed, 1)
        self.assertFalse(timer.is_running)
        self.assertIsNone(timer.start_instant)

        again = timer.current_status(1502.0)
        self.assertIsNone(again.transition)
        self.assertEqual(again.phase, Phase.SHORT_BREAK)
        self.assertEqual(again.to_dict(), {"elapsed_time": "00:00", "text": "05:00"})

    def test_break_completion_returns_to_focus(self):
        timer = PomodoroTimer()
        finish_phase(timer, 0.0)
        status = finish_phase(timer, 5000.0)
        self.assertEqual(status.transition, Phase.FOCUS)
        self.assertEqual(timer.total_time, FOCUS_DURATION)
        self.assertEqual(status.to_dict()["text"], "25:00")

    def test_fourth_focus_enters_long_break_and_resets_cycles(self):
        timer = PomodoroTimer()
        now = 0.0
        entered = []
        for _ in range(CYCLES_PER_LONG_BREAK * 2):
            entered.append(finish_phase(timer, now).transition)
            now += 10000.0
        self.assertEqual(
            entered,
            [
                Phase.SHORT_BREAK, Phase.FOCUS,
                Phase.SHORT_BREAK, Phase.FOCUS,
                Phase.SHORT_BREAK, Phase.FOCUS,
                Phase.LONG_BREAK, Phase.FOCUS,
            ],
        )
        self.assertEqual(timer.phase, Phase.FOCUS)
        self.assertEqual(timer.cycles_completed, 0)

    def test_long_break_duration(self):
        timer = PomodoroTimer()
        timer.cycles_completed = CYCLES_PER_LONG_BREAK - 1
        status = finish_phase(timer, 0.0)
        self.assertEqual(status.transition, Phase.LONG_BREAK)
        self.assertEqual(status.remaining_seconds, LONG_BREAK_DURATION)
        self.assertEqual(timer.cycles_completed, 0)

    def test_counter_past_threshold_never_triggers_long_break(self):
        timer = PomodoroTimer()
        timer.cycles_completed = CYCLES_PER_LONG_BREAK
        status = finish_phase(timer, 0.0)
        self.assertEqual(status.transition, Phase.SHORT_BREAK)
        self.assertEqual(timer.cycles_completed, CYCLES_PER_LONG_BREAK + 1)

    def test_setup_timer_resets(self):
        timer = PomodoroTimer()
        timer.start(now=0.0)
        timer.pause(now=40.0)
        timer.setup_timer(SHORT_BREAK_DURATION)
        self.assertEqual(timer.total_time, SHORT_BREAK_DURATION)
        self.assertEqual(timer.elapsed_time, 0)
        self.assertIsNone(timer.start_instant)
        self.assertIsNone(timer.end_instant)
        self.assertFalse(timer.is_running)

    def test_injected_clock(self):
        ticks = iter([0.0, 42.0])
        timer = PomodoroTimer(clock=lambda: next(ticks))
        timer.start()
        self.assertEqual(timer.current_status().elapsed_seconds, 42)

    def test_format_clock(self):
        self.assertEqual(format_clock(0), "00:00")
        self.assertEqual(format_clock(65), "01:05")
        self.assertEqual(format_clock(1800), "30:00")
        self.assertEqual(format_clock(-5), "00:00")


if __name__ == "__main__":
    unittest.main()
