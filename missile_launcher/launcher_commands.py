"""Camada de aplicação: executa a intenção validada pelo CLI."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

MODULE_DIR = Path(__file__).resolve().parent

if __package__:
    from .launcher_controller import LauncherController
    from .launcher_errors import LauncherError
    from .launcher_protocol import Direction
    from .launcher_responses import LauncherStatus
else:
    if str(MODULE_DIR) not in sys.path:
        sys.path.insert(0, str(MODULE_DIR))
    from launcher_controller import LauncherController  # type: ignore
    from launcher_errors import LauncherError  # type: ignore
    from launcher_protocol import Direction  # type: ignore
    from launcher_responses import LauncherStatus  # type: ignore

logger = logging.getLogger("missile_launcher.commands")


@dataclass(frozen=True)
class LauncherIntent:
    """Pedido do usuário já validado; duração do movimento em microssegundos."""

    movement: Optional[Tuple[Direction, int]] = None
    fire: bool = False
    show_status: bool = False


def format_status(status: LauncherStatus) -> str:
    def _b(flag: bool) -> str:
        return "true" if flag else "false"

    return (
        f"Tilt up limit:      {_b(status.up_limit)}\n"
        f"Tilt down limit:    {_b(status.down_limit)}\n"
        f"Pan left limit:     {_b(status.left_limit)}\n"
        f"Pan right limit:    {_b(status.right_limit)}\n"
        f"Fire complete:      {_b(status.fired)}"
    )


class LauncherCommandExecutor:
    def __init__(
        self,
        controller: LauncherController,
        *,
        fire_max_polls: Optional[int] = None,
        fire_timeout_s: Optional[float] = None,
    ) -> None:
        self.controller = controller
        self.fire_max_polls = fire_max_polls
        self.fire_timeout_s = fire_timeout_s

    def move(self, direction: Direction, duration_us: int) -> None:
        logger.info("Movendo %s por %d ms", direction.value, duration_us // 1000)
        try:
            self.controller.move_turret(direction, duration_us)
        except LauncherError as exc:
            logger.error("Falha ao mover a torre: %s", exc)
            raise

    def fire(self) -> None:
        logger.info("Disparando")
        try:
            self.controller.fire_missile(
                max_polls=self.fire_max_polls,
                timeout_s=self.fire_timeout_s,
            )
        except LauncherError as exc:
            logger.error(
                "Falha ao disparar (estado %s): %s",
                self.controller.fire_state.value,
                exc,
            )
            raise

    def print_status(self) -> LauncherStatus:
        try:
            status = self.controller.get_status()
        except LauncherError as exc:
            logger.error("Falha ao obter informações de status: %s", exc)
            raise
        print(format_status(status))
        return status

    def run(self, intent: LauncherIntent) -> Optional[LauncherStatus]:
        """Movimento, disparo e status, nesta ordem; para na primeira falha."""

        if intent.movement is not None:
            direction, duration_us = intent.movement
            self.move(direction, duration_us)
        if intent.fire:
            self.fire()
        if intent.show_status:
            return self.print_status()
        return None


__all__ = ["LauncherIntent", "LauncherCommandExecutor", "format_status"]
