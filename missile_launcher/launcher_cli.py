#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""CLI do lançador de mísseis USB (Dream Cheeky Rocket Baby).

Sem opções, apenas abre e fecha o dispositivo. As ações pedidas são executadas
na ordem movimento, disparo e status; a primeira falha encerra a execução com
código 1.

Arquivo de configuração opcional (JSON, ``launcher.cfg``)
{
  "device": { "serial": null, "read_timeout_ms": 0 },
  "timing": { "move_hold_time_ms": 100, "fire_hold_time_ms": 500 },
  "fire":   { "max_polls": null, "timeout_s": null },
  "log":    { "level": "warning", "file": null, "report_format": "hex" }
}
As opções de linha de comando têm precedência sobre o arquivo.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

MODULE_DIR = Path(__file__).resolve().parent

if __package__:
    from .launcher_client import LauncherClient
    from .launcher_commands import LauncherCommandExecutor, LauncherIntent
    from .launcher_controller import LauncherController
    from .launcher_errors import LauncherError
    from .launcher_protocol import (
        FIRE_HOLD_TIME_US,
        MAX_MOVE_DURATION_MS,
        MOVE_HOLD_TIME_US,
        Direction,
    )
else:  # execução direta do script a partir do diretório missile_launcher
    if str(MODULE_DIR) not in sys.path:
        sys.path.insert(0, str(MODULE_DIR))
    from launcher_client import LauncherClient  # type: ignore
    from launcher_commands import LauncherCommandExecutor, LauncherIntent  # type: ignore
    from launcher_controller import LauncherController  # type: ignore
    from launcher_errors import LauncherError  # type: ignore
    from launcher_protocol import (  # type: ignore
        FIRE_HOLD_TIME_US,
        MAX_MOVE_DURATION_MS,
        MOVE_HOLD_TIME_US,
        Direction,
    )

DEFAULT_CFG_NAME = "launcher.cfg"
LOG_LEVELS = ("debug", "info", "warning", "error")
REPORT_FORMATS = ("hex", "bin")


@dataclass(frozen=True)
class AppInfo:
    name: str = "missile-launcher"
    version: str = "0.1"
    bug_address: str = "frank8371@gmail.com"

    @classmethod
    def load(cls) -> "AppInfo":
        try:
            version = metadata.version(cls.name)
        except metadata.PackageNotFoundError:
            version = cls.version
        return cls(version=version)

    @property
    def version_text(self) -> str:
        return f"{self.name} {self.version}"


def _load_cfg(path: str | None) -> Dict[str, Any]:
    candidates = [path] if path else [DEFAULT_CFG_NAME]
    if not path:
        candidates.append(str(MODULE_DIR / DEFAULT_CFG_NAME))
    for p in candidates:
        try:
            if os.path.exists(p):
                with open(p, "r", encoding="utf-8") as f:
                    data = json.load(f)
                return data if isinstance(data, dict) else {}
        except (OSError, ValueError):
            continue
    return {}


def _cfg_section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = cfg.get(name, {})
    return section if isinstance(section, dict) else {}


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _mk_logger(level: str = "warning", log_file: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger("missile_launcher")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    logger.propagate = False
    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(sh)
    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(fh)
        logger.info("Iniciando execução (log=%s)", log_file)
    return logger


def _parse_c_integer(value: str) -> int:
    """Inteiro com prefixo de base, como ``strtoul(..., 0)``: ``0x``, ``0o`` ou ``0`` octal."""

    digits = value.lstrip("+-")
    if len(digits) > 1 and digits[0] == "0" and digits.isdigit():
        return int(value, 8)
    return int(value, 0)


def _parse_duration_ms(value: str) -> int:
    try:
        duration_ms = _parse_c_integer(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Duração inválida: '{value}'") from exc
    if not 0 <= duration_ms < MAX_MOVE_DURATION_MS:
        raise argparse.ArgumentTypeError(
            f"Duração inválida: informe um valor entre 0 e {MAX_MOVE_DURATION_MS - 1} ms"
        )
    return duration_ms


def _parse_positive_int(value: str) -> int:
    try:
        parsed = _parse_c_integer(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Inteiro inválido: '{value}'") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError("Informe um inteiro positivo")
    return parsed


def _parse_non_negative_int(value: str) -> int:
    try:
        parsed = _parse_c_integer(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Inteiro inválido: '{value}'") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("O valor não pode ser negativo")
    return parsed


def _parse_seconds(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Tempo inválido: '{value}'") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("O tempo não pode ser negativo")
    return parsed


def _parse_choice(choices: Sequence[str]) -> Callable[[str], str]:
    def _parse(value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in choices:
            raise argparse.ArgumentTypeError(
                f"Valor inválido: '{value}' (use {', '.join(choices)})"
            )
        return normalized

    return _parse


# Mesmos validadores das opções de linha de comando.
_CFG_VALIDATORS: Dict[Tuple[str, str], Callable[[str], Any]] = {
    ("device", "read_timeout_ms"): _parse_non_negative_int,
    ("timing", "move_hold_time_ms"): _parse_duration_ms,
    ("timing", "fire_hold_time_ms"): _parse_duration_ms,
    ("fire", "max_polls"): _parse_positive_int,
    ("fire", "timeout_s"): _parse_seconds,
    ("log", "level"): _parse_choice(LOG_LEVELS),
    ("log", "report_format"): _parse_choice(REPORT_FORMATS),
}
_CFG_STRINGS = (("device", "serial"), ("log", "file"))


def _validate_cfg(cfg: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Devolve as seções conhecidas com valores normalizados.

    Levanta ``argparse.ArgumentTypeError`` indicando ``secao.chave`` no
    primeiro valor inválido.
    """

    validated = {
        name: dict(_cfg_section(cfg, name)) for name in ("device", "timing", "fire", "log")
    }
    for (section, key), parse in _CFG_VALIDATORS.items():
        value = validated[section].get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise argparse.ArgumentTypeError(f"{section}.{key}: valor inválido {value!r}")
        try:
            validated[section][key] = parse(str(value))
        except argparse.ArgumentTypeError as exc:
            raise argparse.ArgumentTypeError(f"{section}.{key}: {exc}") from exc
    for section, key in _CFG_STRINGS:
        value = validated[section].get(key)
        if value is not None and not isinstance(value, str):
            raise argparse.ArgumentTypeError(f"{section}.{key}: texto esperado, não {value!r}")
    return validated


def build_parser(app: Optional[AppInfo] = None) -> argparse.ArgumentParser:
    app = app or AppInfo()
    parser = argparse.ArgumentParser(
        prog=app.name,
        description=(
            "USB missile launcher application for Dream Cheeky's Rocket Baby device."
        ),
        epilog=f"Report bugs to <{app.bug_address}>.",
    )
    parser.add_argument(
        "-m",
        "--move",
        metavar="DIR",
        type=Direction,
        choices=list(Direction),
        help="Move the turret in the requested direction. Must be one of up, down, left, or right",
    )
    parser.add_argument(
        "-t",
        "--time",
        metavar="TIME",
        type=_parse_duration_ms,
        default=None,
        help=(
            "The duration for moving the requested direction, in milliseconds "
            f"(below {MAX_MOVE_DURATION_MS}; default {MOVE_HOLD_TIME_US // 1000})"
        ),
    )
    parser.add_argument("-f", "--fire", action="store_true", help="Fire the turret")
    parser.add_argument(
        "-p", "--status", action="store_true", help="Print out status information"
    )
    parser.add_argument("-V", "--version", action="version", version=app.version_text)
    parser.add_argument(
        "--config",
        default=None,
        help=f"JSON configuration file (default: ./{DEFAULT_CFG_NAME}, if present)",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None)
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    parser.add_argument(
        "--report-log-format",
        choices=REPORT_FORMATS,
        default=None,
        help="Format used to log the HID reports at debug level (default: hex)",
    )
    parser.add_argument(
        "--fire-max-polls",
        type=_parse_positive_int,
        default=None,
        help="Give up firing after this many status reads (default: unlimited)",
    )
    parser.add_argument(
        "--fire-timeout",
        type=_parse_seconds,
        default=None,
        help="Give up firing after this many seconds (default: unlimited)",
    )
    return parser


def build_intent(args: argparse.Namespace, cfg: Optional[Dict[str, Any]] = None) -> LauncherIntent:
    timing = _validate_cfg(cfg or {})["timing"]
    movement = None
    if args.move is not None:
        duration_ms = _first(args.time, timing.get("move_hold_time_ms"))
        if duration_ms is None:
            duration_us = MOVE_HOLD_TIME_US
        else:
            duration_us = int(duration_ms) * 1000
        movement = (args.move, duration_us)
    return LauncherIntent(movement=movement, fire=bool(args.fire), show_status=bool(args.status))


def main(
    argv: Optional[List[str]] = None,
    *,
    app_info: Optional[AppInfo] = None,
    client_factory: Callable[..., Any] = LauncherClient,
) -> int:
    app = app_info or AppInfo.load()
    parser = build_parser(app)
    args = parser.parse_args(argv)

    try:
        cfg = _validate_cfg(_load_cfg(args.config))
    except argparse.ArgumentTypeError as exc:
        parser.error(f"Configuração inválida: {exc}")
    device_cfg = cfg["device"]
    timing_cfg = cfg["timing"]
    fire_cfg = cfg["fire"]
    log_cfg = cfg["log"]

    level = _first(args.log_level, log_cfg.get("level"), "warning")
    log_file = _first(args.log_file, log_cfg.get("file"))
    try:
        logger = _mk_logger(str(level), log_file)
    except OSError as exc:
        parser.error(f"Não foi possível abrir o arquivo de log {log_file}: {exc}")

    intent = build_intent(args, cfg)
    fire_hold_ms = _first(timing_cfg.get("fire_hold_time_ms"), FIRE_HOLD_TIME_US // 1000)

    try:
        client = client_factory(
            serial=device_cfg.get("serial"),
            log_format=_first(args.report_log_format, log_cfg.get("report_format"), "hex"),
        )
    except RuntimeError as exc:
        logger.error("Falha ao abrir o dispositivo: %s", exc)
        return 1

    with client:
        controller = LauncherController(
            client,
            fire_hold_time_s=float(fire_hold_ms) / 1000.0,
            read_timeout_ms=_first(device_cfg.get("read_timeout_ms"), 0),
        )
        executor = LauncherCommandExecutor(
            controller,
            fire_max_polls=_first(args.fire_max_polls, fire_cfg.get("max_polls")),
            fire_timeout_s=_first(args.fire_timeout, fire_cfg.get("timeout_s")),
        )
        try:
            executor.run(intent)
        except LauncherError as exc:
            logger.debug("Execução abortada: %s", exc)
            return 1

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
