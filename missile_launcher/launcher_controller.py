"""Controle dos atuadores do lançador: movimento temporizado, disparo e status.

Todas as operações são síncronas e bloqueantes. Nenhuma falha é repetida ou
ignorada: a primeira exceção interrompe a operação corrente e sobe para quem
chamou. O dispositivo não avisa quando um movimento termina, por isso o
movimento é encerrado por tempo; o disparo, por outro lado, é acompanhado via
polling do bit ``FIRED`` seguido de um atraso fixo antes do STOP.
"""

import logging
import sys
import time
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

MODULE_DIR = Path(__file__).resolve().parent

if __package__:
    from .launcher_errors import (
        CommandFailed,
        FirePollTimeout,
        LauncherError,
        ReadFailed,
        WriteFailed,
    )
    from .launcher_protocol import (
        FIRE_HOLD_TIME_US,
        INPUT_REPORT_LEN,
        Command,
        Direction,
        hex_str,
    )
    from .launcher_requests import LauncherRequestBuilder
    from .launcher_responses import LauncherResponseDecoder, LauncherStatus
else:
    if str(MODULE_DIR) not in sys.path:
        sys.path.insert(0, str(MODULE_DIR))
    from launcher_errors import (  # type: ignore
        CommandFailed,
        FirePollTimeout,
        LauncherError,
        ReadFailed,
        WriteFailed,
    )
    from launcher_protocol import (  # type: ignore
        FIRE_HOLD_TIME_US,
        INPUT_REPORT_LEN,
        Command,
        Direction,
        hex_str,
    )
    from launcher_requests import LauncherRequestBuilder  # type: ignore
    from launcher_responses import LauncherResponseDecoder, LauncherStatus  # type: ignore

logger = logging.getLogger("missile_launcher.controller")


class FireState(Enum):
    IDLE = "idle"
    FIRING = "firing"
    AWAITING_COMPLETE = "awaiting_complete"
    OVERSHOOTING = "overshooting"
    STOPPING = "stopping"
    DONE = "done"
    FAILED = "failed"


class LauncherController:
    """Orquestra encoder/decoder sobre o canal HID.

    ``client`` precisa oferecer ``write(report) -> int`` e
    ``read(size, timeout_ms) -> list``; o controlador não abre nem fecha o
    dispositivo.
    """

    def __init__(
        self,
        client: Any,
        *,
        fire_hold_time_s: float = FIRE_HOLD_TIME_US / 1_000_000,
        read_timeout_ms: int = 0,
        sleep: Callable[[float], None] = time.sleep,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        if fire_hold_time_s < 0:
            raise ValueError("fire_hold_time_s não pode ser negativo")
        if read_timeout_ms < 0:
            raise ValueError("read_timeout_ms não pode ser negativo")
        self.client = client
        self.fire_hold_time_s = float(fire_hold_time_s)
        self.read_timeout_ms = int(read_timeout_ms)
        self._sleep = sleep
        self._monotonic = monotonic
        self.fire_state = FireState.IDLE

    def _set_fire_state(self, state: FireState) -> None:
        logger.debug("Disparo: %s -> %s", self.fire_state.value, state.value)
        self.fire_state = state

    def send_command(self, command: Command) -> None:
        report = LauncherRequestBuilder.command(command)
        try:
            written = self.client.write(report)
        except OSError as exc:
            raise WriteFailed(
                f"Falha ao escrever output report ({hex_str(report)}): {exc}"
            ) from exc
        if written < len(report):
            raise WriteFailed(
                f"Output report incompleto ({hex_str(report)}): "
                f"{written} de {len(report)} bytes escritos"
            )

    def get_status(self) -> LauncherStatus:
        try:
            self.send_command(Command.GET_STATUS)
        except WriteFailed as exc:
            raise CommandFailed(f"Falha ao solicitar status: {exc}") from exc

        try:
            rx = self.client.read(INPUT_REPORT_LEN, self.read_timeout_ms)
        except OSError as exc:
            raise ReadFailed(f"Falha ao ler input report: {exc}") from exc
        if not rx:
            raise ReadFailed("Input report vazio (timeout ou dispositivo sem resposta)")
        return LauncherResponseDecoder.status(rx)

    def move_turret(self, direction: Direction, duration_us: int) -> None:
        if duration_us < 0:
            raise ValueError("duration_us não pode ser negativo")
        command = LauncherRequestBuilder.movement_command(direction)
        self.send_command(command)

        self._sleep(duration_us / 1_000_000)

        try:
            self.send_command(Command.STOP)
        except WriteFailed:
            logger.error(
                "Falha ao enviar STOP após mover %s; o atuador pode continuar energizado",
                direction.value,
            )
            raise

    def fire_missile(
        self,
        max_polls: Optional[int] = None,
        timeout_s: Optional[float] = None,
    ) -> int:
        """Dispara um míssil e devolve o número de leituras de status feitas.

        Sem ``max_polls``/``timeout_s`` o polling é ilimitado, igual ao
        comportamento do dispositivo: um lançador que nunca sinaliza ``FIRED``
        mantém o laço ativo. Com qualquer um dos limites, o esgotamento envia
        STOP e levanta ``FirePollTimeout``.
        """

        if max_polls is not None and max_polls < 1:
            raise ValueError("max_polls deve ser positivo")
        if timeout_s is not None and timeout_s < 0:
            raise ValueError("timeout_s não pode ser negativo")

        self._set_fire_state(FireState.FIRING)
        polls = 0
        try:
            self.send_command(Command.FIRE)
            self._set_fire_state(FireState.AWAITING_COMPLETE)

            deadline = None if timeout_s is None else self._monotonic() + timeout_s
            while True:
                status = self.get_status()
                polls += 1
                if status.fired:
                    break
                if max_polls is not None and polls >= max_polls:
                    self.send_command(Command.STOP)
                    raise FirePollTimeout(
                        f"Disparo não concluído após {polls} leituras de status"
                    )
                if deadline is not None and self._monotonic() >= deadline:
                    self.send_command(Command.STOP)
                    raise FirePollTimeout(
                        f"Disparo não concluído em {timeout_s:.3f}s ({polls} leituras)"
                    )

            # O bit FIRED sobe um pouco antes do fim mecânico do disparo.
            self._set_fire_state(FireState.OVERSHOOTING)
            self._sleep(self.fire_hold_time_s)

            self._set_fire_state(FireState.STOPPING)
            self.send_command(Command.STOP)
        except LauncherError:
            self._set_fire_state(FireState.FAILED)
            raise

        self._set_fire_state(FireState.DONE)
        logger.debug("Disparo concluído após %d leituras de status", polls)
        return polls


__all__ = ["FireState", "LauncherController"]
