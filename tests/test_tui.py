import termios
import unittest
from unittest import mock

from cli_timer import tui as tui_module
from cli_timer.tui import TerminalError, Tui

from tests.helpers import make_app


def fake_attrs():
    return [0xFFFF, 0xFFFF, 0, 0xFFFF, 0, 0, [0] * 32]


class TestTui(unittest.TestCase):
    def setUp(self):
        self.events = mock.MagicMock()
        stdin = mock.patch.object(tui_module.sys, "stdin")
        self.stdin = stdin.start()
        self.addCleanup(stdin.stop)
        self.stdin.fileno.return_value = 0

    def test_init_failure_raises_terminal_error(self):
        with mock.patch.object(tui_module.termios, "tcgetattr", side_effect=termios.error(25, "not a tty")):
            t = Tui(self.events)
            with self.assertRaises(TerminalError):
                t.init()
        self.events.start.assert_not_called()
        self.assertIsNone(t.live)

    def test_init_and_exit_restore_terminal(self):
        with mock.patch.object(tui_module.termios, "tcgetattr", side_effect=lambda fd: fake_attrs()), \
                mock.patch.object(tui_module.termios, "tcsetattr") as tcsetattr, \
                mock.patch.object(tui_module, "Live") as live_cls:
            t = Tui(self.events)
            t.init()

            _, when, mode = tcsetattr.call_args[0]
            self.assertEqual(when, termios.TCSAFLUSH)
            self.assertFalse(mode[3] & termios.ECHO)
            self.assertFalse(mode[3] & termios.ICANON)
            self.assertFalse(mode[3] & termios.ISIG)
            self.assertEqual(mode[1], 0xFFFF)
            self.events.start.assert_called_once_with()
            live_cls.return_value.start.assert_called_once_with()

            app, _, _ = make_app()
            t.draw(app)
            live_cls.return_value.update.assert_called_once()

            t.exit()
            live_cls.return_value.stop.assert_called_once_with()
            self.events.close.assert_called_once_with()
            self.assertEqual(tcsetattr.call_args[0], (0, termios.TCSADRAIN, fake_attrs()))

    def test_draw_before_init_is_noop(self):
        t = Tui(self.events)
        app, _, _ = make_app()
        t.draw(app)
        t.exit()
        self.events.close.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
