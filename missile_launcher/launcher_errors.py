"""Erros reportados pela camada de controle do lançador."""


class LauncherError(RuntimeError):
    """Base de todas as falhas do lançador."""


class DeviceOpenFailed(LauncherError, ConnectionError):
    """Dispositivo HID não encontrado ou sem permissão de acesso."""


class WriteFailed(LauncherError):
    """Output report não foi escrito por completo."""


class ReadFailed(LauncherError):
    """Input report não foi lido (erro ou leitura vazia)."""


class CommandFailed(LauncherError):
    """Envio de um comando pré-requisito falhou dentro de uma operação composta."""


class UnsupportedMovement(LauncherError, ValueError):
    """Movimento sem opcode correspondente."""


class FirePollTimeout(LauncherError, TimeoutError):
    """Bit de disparo concluído não apareceu dentro do limite solicitado."""


__all__ = [
    "LauncherError",
    "DeviceOpenFailed",
    "WriteFailed",
    "ReadFailed",
    "CommandFailed",
    "UnsupportedMovement",
    "FirePollTimeout",
]
