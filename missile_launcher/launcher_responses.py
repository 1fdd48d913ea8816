"""Decodificação dos input reports recebidos do lançador."""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Sequence

MODULE_DIR = Path(__file__).resolve().parent

if __package__:
    from .launcher_protocol import STATUS_MASK, StatusBit
else:
    if str(MODULE_DIR) not in sys.path:
        sys.path.insert(0, str(MODULE_DIR))
    from launcher_protocol import STATUS_MASK, StatusBit  # type: ignore


@dataclass(frozen=True)
class LauncherStatus:
    """Chaves de fim de curso e indicador de disparo concluído.

    Os campos são independentes: no meio do curso nenhum limite está ativo e,
    em teoria, mais de um pode aparecer ao mesmo tempo.
    """

    down_limit: bool
    up_limit: bool
    left_limit: bool
    right_limit: bool
    fired: bool
    raw: int = 0

    def as_dict(self) -> Dict[str, bool]:
        return {
            "upLimit": self.up_limit,
            "downLimit": self.down_limit,
            "leftLimit": self.left_limit,
            "rightLimit": self.right_limit,
            "fired": self.fired,
        }


class LauncherResponseDecoder:
    """Decodificadores das mensagens recebidas do dispositivo."""

    @staticmethod
    def status_byte(value: int) -> LauncherStatus:
        flags = StatusBit(value & STATUS_MASK)
        return LauncherStatus(
            down_limit=bool(flags & StatusBit.DOWN_LIMIT),
            up_limit=bool(flags & StatusBit.UP_LIMIT),
            left_limit=bool(flags & StatusBit.LEFT_LIMIT),
            right_limit=bool(flags & StatusBit.RIGHT_LIMIT),
            fired=bool(flags & StatusBit.FIRED),
            raw=value & 0xFF,
        )

    @staticmethod
    def status(raw: Sequence[int]) -> LauncherStatus:
        if not raw:
            raise ValueError("Input report vazio")
        return LauncherResponseDecoder.status_byte(raw[0])


__all__ = ["LauncherStatus", "LauncherResponseDecoder"]
