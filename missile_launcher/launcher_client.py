"""Cliente HID que conversa com o lançador de mísseis."""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

MODULE_DIR = Path(__file__).resolve().parent

if __package__:
    from .launcher_errors import DeviceOpenFailed
    from .launcher_protocol import LAUNCHER_PID, LAUNCHER_VID, bits_str, hex_str
else:
    if str(MODULE_DIR) not in sys.path:
        sys.path.insert(0, str(MODULE_DIR))
    from launcher_errors import DeviceOpenFailed  # type: ignore
    from launcher_protocol import LAUNCHER_PID, LAUNCHER_VID, bits_str, hex_str  # type: ignore

try:  # pragma: no cover - dependência externa
    import hid  # type: ignore
except Exception:  # pragma: no cover - testes substituem via patch
    hid = None

logger = logging.getLogger("missile_launcher.client")


class LauncherClient:
    """Canal HID bidirecional com o lançador (um dispositivo por execução)."""

    def __init__(
        self,
        vendor_id: int = LAUNCHER_VID,
        product_id: int = LAUNCHER_PID,
        serial: Optional[str] = None,
        *,
        log_format: str = "hex",
    ) -> None:
        if hid is None:
            raise RuntimeError("hidapi não disponível. Instale com `pip install hidapi`.")

        normalized_format = (log_format or "hex").strip().lower()
        if normalized_format not in {"hex", "bin"}:
            raise ValueError(
                "log_format inválido. Utilize 'hex' ou 'bin' (padrão: 'hex')."
            )
        self._log_format = normalized_format

        self.device = hid.device()
        try:
            self.device.open(vendor_id, product_id, serial)
        except (OSError, ValueError) as exc:
            raise DeviceOpenFailed(
                f"Falha ao abrir o dispositivo {vendor_id:04x}:{product_id:04x}: {exc}"
            ) from exc
        self._closed = False

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.device.close()
        except OSError as exc:  # pragma: no cover - depende do backend hidapi
            logger.debug("Falha ao fechar o dispositivo: %s", exc)

    def __enter__(self) -> "LauncherClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _format_bytes(self, data: Sequence[int]) -> str:
        if self._log_format == "hex":
            return hex_str(data)
        return bits_str(data)

    def write(self, report: Sequence[int]) -> int:
        tx = [b & 0xFF for b in report]
        logger.debug("HID TX: %s", self._format_bytes(tx))
        return self.device.write(tx)

    def read(self, size: int, timeout_ms: int = 0) -> List[int]:
        """Lê um input report; ``timeout_ms`` igual a 0 bloqueia até chegar dado."""

        rx = list(self.device.read(size, timeout_ms))
        logger.debug("HID RX: %s", self._format_bytes(rx) if rx else "(vazio)")
        return rx


__all__ = ["LauncherClient"]
