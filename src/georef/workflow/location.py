"""Current-position acquisition with native-first, browser-second fallback.

The native (mobile) positioning API is always tried first. Any failure there
falls through to the browser positioning API with the same parameters and a
zero maximum age. Only browser failures are classified and shown to the user,
so callers never need their own geolocation error copy.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from ..config import settings
from ..errors import LocationErrorKind, LocationUnavailable, LocationUnsupported, location_error_for
from ..models.domain import LocationResult
from .notifications import Notifier

logger = logging.getLogger(__name__)

SUCCESS_TITLE = "📍 Localização obtida com sucesso!"
ERROR_TOAST_MS = 8000
GENERIC_TOAST_MS = 5000

_IOS_PATTERN = re.compile(r"iPhone|iPad|iPod", re.IGNORECASE)

_IOS_MESSAGES: dict[LocationErrorKind, tuple[str, str]] = {
    LocationErrorKind.PERMISSION_DENIED: (
        "📱 Localização Bloqueada no iPhone",
        "Para habilitar, siga os passos:\n\n"
        "1. Abra Ajustes → Privacidade e Segurança → Localização\n"
        '2. Ative "Serviços de Localização"\n'
        '3. Role até "Safari" → selecione "Ao Usar o App"\n'
        "4. Volte ao app e toque no botão novamente\n\n"
        'Se já fez isso, toque no "aA" na barra de endereço do Safari → '
        "Configurações do Site → Localização → Permitir",
    ),
    LocationErrorKind.POSITION_UNAVAILABLE: (
        "📍 Localização Indisponível",
        "Não foi possível obter sua localização. Verifique se o GPS está ativado e tente novamente.",
    ),
    LocationErrorKind.TIMEOUT: (
        "⏱️ Tempo Esgotado",
        "A busca pela localização demorou muito. Verifique sua conexão e tente novamente.",
    ),
    LocationErrorKind.UNKNOWN: (
        "❌ Erro ao Obter Localização",
        "Não foi possível obter sua localização. Verifique as permissões nas configurações.",
    ),
}

_GENERIC_MESSAGES: dict[LocationErrorKind, tuple[str, str]] = {
    LocationErrorKind.PERMISSION_DENIED: (
        "🚫 Permissão de Localização Negada",
        "Para usar sua localização:\n\n"
        "1. Permita o acesso à localização quando solicitado pelo navegador\n"
        "2. Se já negou, clique no ícone de cadeado/permissões na barra de endereço\n"
        '3. Altere as permissões de localização para "Permitir"\n'
        "4. Recarregue a página e tente novamente",
    ),
    LocationErrorKind.POSITION_UNAVAILABLE: (
        "📍 Localização Indisponível",
        "Não foi possível obter sua localização. Verifique se o GPS está ativado.",
    ),
    LocationErrorKind.TIMEOUT: (
        "⏱️ Tempo Esgotado",
        "A busca pela localização demorou muito. Tente novamente.",
    ),
    LocationErrorKind.UNKNOWN: (
        "❌ Erro ao Obter Localização",
        "Não foi possível obter sua localização. Verifique as permissões.",
    ),
}


@dataclass(frozen=True, slots=True)
class Position:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


class PositionError(Exception):
    """Failure reported by a positioning API (1 denied, 2 unavailable, 3 timeout)."""

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message or f"positioning error {code}")
        self.code = code
        self.message = message


class PositionSource(Protocol):
    name: str

    def get_current_position(
        self, *, enable_high_accuracy: bool, timeout: float, maximum_age: float | None
    ) -> Position:
        """Return a fix or raise ``PositionError``; ``NotImplementedError`` means unsupported."""
        ...


class CallablePositionSource:
    """Adapts a plain callable to ``PositionSource``."""

    def __init__(self, name: str, func: Callable[..., Position]) -> None:
        self.name = name
        self._func = func

    def get_current_position(
        self, *, enable_high_accuracy: bool, timeout: float, maximum_age: float | None
    ) -> Position:
        return self._func(enable_high_accuracy=enable_high_accuracy, timeout=timeout, maximum_age=maximum_age)


def is_ios(user_agent: str | None) -> bool:
    return bool(user_agent and _IOS_PATTERN.search(user_agent))


def location_error_message(kind: LocationErrorKind, user_agent: str | None = None) -> tuple[str, str]:
    """(title, body) for a positioning failure, with iOS-specific remediation on iOS."""
    messages = _IOS_MESSAGES if is_ios(user_agent) else _GENERIC_MESSAGES
    return messages[kind]


@dataclass(slots=True)
class LocationOptions:
    on_success: Callable[[LocationResult], None]
    on_error: Optional[Callable[[Exception], None]] = None
    timeout: float = 10.0
    enable_high_accuracy: bool = True


class LocationProvider:
    def __init__(
        self,
        native: PositionSource | None = None,
        browser: PositionSource | None = None,
        notifier: Notifier | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.native = native
        self.browser = browser
        self.notifier = notifier or Notifier()
        self.user_agent = user_agent

    def locate(
        self, *, timeout: float | None = None, enable_high_accuracy: bool | None = None
    ) -> LocationResult:
        """Return the current position or raise a ``LocationUnavailable`` subclass."""
        timeout = timeout if timeout is not None else settings.location_timeout_seconds
        if enable_high_accuracy is None:
            enable_high_accuracy = settings.location_high_accuracy

        if self.native is not None:
            try:
                position = self.native.get_current_position(
                    enable_high_accuracy=enable_high_accuracy, timeout=timeout, maximum_age=None
                )
            except Exception as e:
                logger.info(f"Native geolocation failed, trying browser API: {e!r}")
            else:
                return self._succeed(position, self.native.name, used_fallback=False)

        if self.browser is None:
            raise self._unsupported()
        try:
            position = self.browser.get_current_position(
                enable_high_accuracy=enable_high_accuracy, timeout=timeout, maximum_age=0
            )
        except NotImplementedError as e:
            raise self._unsupported() from e
        except PositionError as e:
            kind = LocationErrorKind.from_code(e.code)
            logger.warning(f"Browser geolocation error ({kind.value}): {e.message}")
            self.show_location_error(kind)
            raise location_error_for(kind, f"Geolocation error: {e.message}") from e
        except Exception as e:
            logger.exception(f"Unexpected browser geolocation failure: {e}")
            self._notify_generic_failure()
            raise LocationUnavailable(f"Geolocation error: {e}", kind=LocationErrorKind.UNKNOWN) from e
        return self._succeed(position, self.browser.name, used_fallback=True)

    def get_current_location(self, options: LocationOptions) -> LocationResult | None:
        """Callback form of ``locate``; errors are already notified when ``on_error`` runs."""
        try:
            result = self.locate(timeout=options.timeout, enable_high_accuracy=options.enable_high_accuracy)
        except LocationUnavailable as e:
            if options.on_error is not None:
                options.on_error(e)
            return None
        options.on_success(result)
        return result

    def show_location_error(self, kind: LocationErrorKind) -> None:
        title, body = location_error_message(kind, self.user_agent)
        self.notifier.error(title, body, duration_ms=ERROR_TOAST_MS)

    def _succeed(self, position: Position, source: str, *, used_fallback: bool) -> LocationResult:
        result = LocationResult(
            latitude=str(position.latitude),
            longitude=str(position.longitude),
            source=source,
            used_fallback=used_fallback,
        )
        self.notifier.success(SUCCESS_TITLE)
        return result

    def _notify_generic_failure(self) -> None:
        title, body = _GENERIC_MESSAGES[LocationErrorKind.UNKNOWN]
        self.notifier.error(title, body, duration_ms=GENERIC_TOAST_MS)

    def _unsupported(self) -> LocationUnsupported:
        self._notify_generic_failure()
        return LocationUnsupported("Geolocalização não suportada pelo navegador")
