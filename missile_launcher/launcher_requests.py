"""Montagem dos output reports enviados ao lançador."""

import sys
from pathlib import Path
from typing import List

MODULE_DIR = Path(__file__).resolve().parent

if __package__:
    from .launcher_errors import UnsupportedMovement
    from .launcher_protocol import (
        MOVEMENT_COMMANDS,
        OUTPUT_REPORT_LEN,
        REPORT_ID,
        Command,
        Direction,
    )
else:
    if str(MODULE_DIR) not in sys.path:
        sys.path.insert(0, str(MODULE_DIR))
    from launcher_errors import UnsupportedMovement  # type: ignore
    from launcher_protocol import (  # type: ignore
        MOVEMENT_COMMANDS,
        OUTPUT_REPORT_LEN,
        REPORT_ID,
        Command,
        Direction,
    )


class LauncherRequestBuilder:
    """Factory centralizada dos reports enviados ao dispositivo."""

    @staticmethod
    def command(command: Command) -> List[int]:
        raw = [0] * OUTPUT_REPORT_LEN
        raw[0] = REPORT_ID  # sempre 0 para este dispositivo
        raw[1] = Command(command).value & 0xFF
        return raw

    @staticmethod
    def movement_command(direction: Direction) -> Command:
        try:
            return MOVEMENT_COMMANDS[direction]
        except (KeyError, TypeError) as exc:
            raise UnsupportedMovement(f"Movimento não reconhecido: {direction!r}") from exc

    @staticmethod
    def move(direction: Direction) -> List[int]:
        cmd = LauncherRequestBuilder.movement_command(direction)
        return LauncherRequestBuilder.command(cmd)

    @staticmethod
    def fire() -> List[int]:
        return LauncherRequestBuilder.command(Command.FIRE)

    @staticmethod
    def stop() -> List[int]:
        return LauncherRequestBuilder.command(Command.STOP)

    @staticmethod
    def get_status() -> List[int]:
        return LauncherRequestBuilder.command(Command.GET_STATUS)


__all__ = ["LauncherRequestBuilder"]
