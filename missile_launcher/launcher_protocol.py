"""Constantes e utilitários comuns para o protocolo HID do lançador de mísseis."""

from enum import Enum, IntEnum, IntFlag
from typing import Iterable

# Identificação USB (Dream Cheeky "Rocket Baby")
LAUNCHER_VID = 0x0A81
LAUNCHER_PID = 0x0701

# Output report: [report id, comando]
REPORT_ID = 0x00
OUTPUT_REPORT_LEN = 2

# Input report: 1 byte com os bits de status
INPUT_REPORT_LEN = 1

# Tempos padrão
MOVE_HOLD_TIME_US = 100_000
FIRE_HOLD_TIME_US = 500_000

# Limite (exclusivo) da duração aceita pelo CLI
MAX_MOVE_DURATION_MS = 10_000


class Command(IntEnum):
    """Opcodes aceitos pelo dispositivo (um por output report)."""

    MOVE_DOWN = 0x01
    MOVE_UP = 0x02
    MOVE_LEFT = 0x04
    MOVE_RIGHT = 0x08
    FIRE = 0x10
    STOP = 0x20
    GET_STATUS = 0x40


class StatusBit(IntFlag):
    """Bits publicados no input report."""

    DOWN_LIMIT = 0x01
    UP_LIMIT = 0x02
    LEFT_LIMIT = 0x04
    RIGHT_LIMIT = 0x08
    FIRED = 0x10


STATUS_MASK = int(
    StatusBit.DOWN_LIMIT
    | StatusBit.UP_LIMIT
    | StatusBit.LEFT_LIMIT
    | StatusBit.RIGHT_LIMIT
    | StatusBit.FIRED
)


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


MOVEMENT_COMMANDS = {
    Direction.UP: Command.MOVE_UP,
    Direction.DOWN: Command.MOVE_DOWN,
    Direction.LEFT: Command.MOVE_LEFT,
    Direction.RIGHT: Command.MOVE_RIGHT,
}


def bits_str(bs: Iterable[int]) -> str:
    return " ".join(f"{b & 0xFF:08b}" for b in bs)


def hex_str(bs: Iterable[int]) -> str:
    return " ".join(f"{b & 0xFF:02X}" for b in bs)


__all__ = [
    "LAUNCHER_VID",
    "LAUNCHER_PID",
    "REPORT_ID",
    "OUTPUT_REPORT_LEN",
    "INPUT_REPORT_LEN",
    "MOVE_HOLD_TIME_US",
    "FIRE_HOLD_TIME_US",
    "MAX_MOVE_DURATION_MS",
    "Command",
    "StatusBit",
    "STATUS_MASK",
    "Direction",
    "MOVEMENT_COMMANDS",
    "bits_str",
    "hex_str",
]
