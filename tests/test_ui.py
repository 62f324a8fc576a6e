import io
import unittest
from datetime import timedelta

from rich.console import Console

from cli_timer.app import Mode
from cli_timer.ui import RESTART_PROMPT, format_time_left, render, split_time, status_text

from tests.helpers import make_app


def render_text(app, width=100, height=20):
    console = Console(file=io.StringIO(), width=width, height=height, record=True, color_system=None)
    console.print(render(app))
    return console.export_text()


class TestTimeString(unittest.TestCase):
    def test_split_time(self):
        self.assertEqual(split_time(timedelta(hours=26, minutes=3, seconds=9)), (26, 3, 9))
        self.assertEqual(split_time(timedelta(seconds=-3671)), (1, 1, 11))

    def test_split_time_truncates_toward_zero(self):
        self.assertEqual(split_time(timedelta(seconds=5, milliseconds=900)), (0, 0, 5))
        self.assertEqual(split_time(timedelta(seconds=-5, milliseconds=-900)), (0, 0, 5))

    def test_running_has_no_minus(self):
        app, _, _ = make_app(seconds=5)
        self.assertEqual(format_time_left(app), " 00:00:05")
        self.assertNotIn("-", format_time_left(app))

    def test_triggered_overtime_has_minus(self):
        app, _, _ = make_app(seconds=5)
        app.mode = Mode.triggered()
        app.time_left = timedelta(seconds=-5)
        self.assertEqual(format_time_left(app), "-00:00:05")


class TestStatusLine(unittest.TestCase):
    def test_status_per_phase(self):
        app, _, _ = make_app(label="Tea is ready")
        self.assertEqual(status_text(app), "")

        app.mode = Mode.paused(app.phase)
        self.assertEqual(status_text(app), "Paused")

        app.mode = Mode.confirm_restart()
        self.assertEqual(status_text(app), RESTART_PROMPT)

        app.mode = Mode.triggered()
        self.assertEqual(status_text(app), "Tea is ready")

    def test_triggered_without_label(self):
        app, _, _ = make_app()
        app.mode = Mode.triggered()
        self.assertEqual(status_text(app), "")


class TestRender(unittest.TestCase):
    def test_frame_shows_clock_and_label(self):
        app, _, _ = make_app(label="Pasta")
        app.mode = Mode.triggered()
        app.time_left = timedelta(minutes=-2, seconds=-5)
        out = render_text(app)
        self.assertIn("-00:02:05", out)
        self.assertIn("Pasta", out)

    def test_label_hidden_until_triggered(self):
        app, _, _ = make_app(seconds=65, label="Pasta")
        out = render_text(app)
        self.assertIn("00:01:05", out)
        self.assertNotIn("Pasta", out)

    def test_render_does_not_mutate(self):
        app, _, _ = make_app(label="Pasta")
        before = (app.mode, app.time_left, app.end_time, app.color, app.running)
        render_text(app)
        self.assertEqual((app.mode, app.time_left, app.end_time, app.color, app.running), before)


if __name__ == "__main__":
    unittest.main()
