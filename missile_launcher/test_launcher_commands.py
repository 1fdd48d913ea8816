import io
import sys
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import MagicMock

MODULE_DIR = Path(__file__).resolve().parent

if __package__:
    from .launcher_commands import LauncherCommandExecutor, LauncherIntent, format_status
    from .launcher_controller import FireState
    from .launcher_errors import CommandFailed, WriteFailed
    from .launcher_protocol import Direction
    from .launcher_responses import LauncherResponseDecoder
else:
    if str(MODULE_DIR) not in sys.path:
        sys.path.insert(0, str(MODULE_DIR))
    from launcher_commands import LauncherCommandExecutor, LauncherIntent, format_status  # type: ignore
    from launcher_controller import FireState  # type: ignore
    from launcher_errors import CommandFailed, WriteFailed  # type: ignore
    from launcher_protocol import Direction  # type: ignore
    from launcher_responses import LauncherResponseDecoder  # type: ignore


def _mock_controller():
    controller = MagicMock()
    controller.fire_state = FireState.IDLE
    controller.get_status.return_value = LauncherResponseDecoder.status_byte(0x06)
    return controller


class FormatStatusTests(unittest.TestCase):
    def test_labels_follow_device_order(self) -> None:
        text = format_status(LauncherResponseDecoder.status_byte(0x06))
        self.assertEqual(
            text.splitlines(),
            [
                "Tilt up limit:      true",
                "Tilt down limit:    false",
                "Pan left limit:     true",
                "Pan right limit:    false",
                "Fire complete:      false",
            ],
        )


class LauncherCommandExecutorTests(unittest.TestCase):
    def test_runs_move_fire_status_in_order(self) -> None:
        controller = _mock_controller()
        executor = LauncherCommandExecutor(controller, fire_max_polls=5, fire_timeout_s=2.0)
        intent = LauncherIntent(
            movement=(Direction.LEFT, 200_000), fire=True, show_status=True
        )

        buf = io.StringIO()
        with redirect_stdout(buf):
            status = executor.run(intent)

        self.assertEqual(
            [c[0] for c in controller.method_calls],
            ["move_turret", "fire_missile", "get_status"],
        )
        controller.move_turret.assert_called_once_with(Direction.LEFT, 200_000)
        controller.fire_missile.assert_called_once_with(max_polls=5, timeout_s=2.0)
        self.assertTrue(status.up_limit)
        self.assertIn("Pan left limit:     true", buf.getvalue())

    def test_empty_intent_touches_nothing(self) -> None:
        controller = _mock_controller()
        self.assertIsNone(LauncherCommandExecutor(controller).run(LauncherIntent()))
        self.assertEqual(controller.method_calls, [])

    def test_failed_move_aborts_sequence(self) -> None:
        controller = _mock_controller()
        controller.move_turret.side_effect = WriteFailed("write error")
        executor = LauncherCommandExecutor(controller)
        intent = LauncherIntent(movement=(Direction.UP, 1000), fire=True, show_status=True)

        with self.assertLogs("missile_launcher.commands", level="ERROR") as logs:
            with self.assertRaises(WriteFailed):
                executor.run(intent)

        controller.fire_missile.assert_not_called()
        controller.get_status.assert_not_called()
        self.assertIn("mover a torre", logs.output[0])

    def test_failed_fire_skips_status(self) -> None:
        controller = _mock_controller()
        controller.fire_missile.side_effect = CommandFailed("no status")
        executor = LauncherCommandExecutor(controller)

        with self.assertLogs("missile_launcher.commands", level="ERROR"):
            with self.assertRaises(CommandFailed):
                executor.run(LauncherIntent(fire=True, show_status=True))

        controller.get_status.assert_not_called()

    def test_failed_status_prints_nothing(self) -> None:
        controller = _mock_controller()
        controller.get_status.side_effect = CommandFailed("no status")
        buf = io.StringIO()
        with redirect_stdout(buf), self.assertLogs("missile_launcher.commands", level="ERROR"):
            with self.assertRaises(CommandFailed):
                LauncherCommandExecutor(controller).run(LauncherIntent(show_status=True))
        self.assertEqual(buf.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
