import pytest

from src.georef.errors import (
    LocationErrorKind,
    LocationTimeout,
    LocationUnavailable,
    LocationUnsupported,
    PermissionDenied,
)
from src.georef.workflow.location import (
    SUCCESS_TITLE,
    LocationOptions,
    LocationProvider,
    Position,
    PositionError,
    location_error_message,
)
from src.georef.workflow.notifications import NotificationLevel, Notifier

IPHONE_UA = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Safari/604.1"
DESKTOP_UA = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 Chrome/120.0 Safari/537.36"


class FakeSource:
    def __init__(self, name: str, position: Position | None = None, error: Exception | None = None):
        self.name = name
        self.position = position
        self.error = error
        self.calls: list[dict] = []

    def get_current_position(self, *, enable_high_accuracy, timeout, maximum_age):
        self.calls.append(
            {"enable_high_accuracy": enable_high_accuracy, "timeout": timeout, "maximum_age": maximum_age}
        )
        if self.error is not None:
            raise self.error
        return self.position


def test_native_success_skips_browser():
    native = FakeSource("native", Position(-15.8, -47.9))
    browser = FakeSource("browser", Position(0.0, 0.0))
    notifier = Notifier()
    provider = LocationProvider(native, browser, notifier)

    result = provider.locate(timeout=10.0, enable_high_accuracy=True)

    assert result.latitude == "-15.8"
    assert result.longitude == "-47.9"
    assert result.source == "native"
    assert result.used_fallback is False
    assert browser.calls == []
    assert [n.title for n in notifier.history] == [SUCCESS_TITLE]


def test_native_failure_falls_back_to_browser_with_same_parameters():
    native = FakeSource("native", error=PositionError(1, "denied"))
    browser = FakeSource("browser", Position(-15.81, -48.06))
    notifier = Notifier()
    provider = LocationProvider(native, browser, notifier)

    result = provider.locate(timeout=7.5, enable_high_accuracy=False)

    assert result.used_fallback is True
    assert result.source == "browser"
    assert native.calls == [{"enable_high_accuracy": False, "timeout": 7.5, "maximum_age": None}]
    assert browser.calls == [{"enable_high_accuracy": False, "timeout": 7.5, "maximum_age": 0}]
    # the native failure is not reported to the user
    assert [n.level for n in notifier.history] == [NotificationLevel.SUCCESS]


def test_unsupported_native_api_also_falls_back():
    native = FakeSource("native", error=NotImplementedError("no plugin"))
    browser = FakeSource("browser", Position(1.5, 2.5))
    provider = LocationProvider(native, browser)

    assert provider.locate(timeout=10.0).latitude == "1.5"


@pytest.mark.parametrize(
    "code, error_type, title",
    [
        (1, PermissionDenied, "🚫 Permissão de Localização Negada"),
        (2, LocationUnavailable, "📍 Localização Indisponível"),
        (3, LocationTimeout, "⏱️ Tempo Esgotado"),
    ],
)
def test_browser_failure_is_classified_with_generic_copy(code, error_type, title):
    native = FakeSource("native", error=PositionError(2))
    browser = FakeSource("browser", error=PositionError(code, "boom"))
    notifier = Notifier()
    provider = LocationProvider(native, browser, notifier, user_agent=DESKTOP_UA)

    with pytest.raises(error_type) as exc_info:
        provider.locate(timeout=10.0)

    assert exc_info.value.kind is LocationErrorKind.from_code(code)
    assert len(notifier.history) == 1
    assert notifier.history[0].level is NotificationLevel.ERROR
    assert notifier.history[0].title == title
    assert notifier.history[0].duration_ms == 8000


def test_unknown_error_code_maps_to_unknown_kind():
    browser = FakeSource("browser", error=PositionError(42, "weird"))
    provider = LocationProvider(None, browser)

    with pytest.raises(LocationUnavailable) as exc_info:
        provider.locate(timeout=10.0)

    assert type(exc_info.value) is LocationUnavailable
    assert exc_info.value.kind is LocationErrorKind.UNKNOWN


def test_ios_user_agent_gets_device_specific_instructions():
    browser = FakeSource("browser", error=PositionError(1))
    notifier = Notifier()
    provider = LocationProvider(None, browser, notifier, user_agent=IPHONE_UA)

    with pytest.raises(PermissionDenied):
        provider.locate(timeout=10.0)

    assert notifier.history[0].title == "📱 Localização Bloqueada no iPhone"
    assert "Ajustes" in notifier.history[0].description


def test_timeout_copy_differs_between_ios_and_generic():
    ios_title, ios_body = location_error_message(LocationErrorKind.TIMEOUT, IPHONE_UA)
    generic_title, generic_body = location_error_message(LocationErrorKind.TIMEOUT, DESKTOP_UA)

    assert ios_title == generic_title == "⏱️ Tempo Esgotado"
    assert ios_body == "A busca pela localização demorou muito. Verifique sua conexão e tente novamente."
    assert generic_body == "A busca pela localização demorou muito. Tente novamente."


def test_missing_browser_api_is_unsupported():
    native = FakeSource("native", error=PositionError(2))
    notifier = Notifier()
    provider = LocationProvider(native, None, notifier)

    with pytest.raises(LocationUnsupported):
        provider.locate(timeout=10.0)

    assert notifier.history[0].title == "❌ Erro ao Obter Localização"
    assert notifier.history[0].duration_ms == 5000


def test_callback_form_reports_success_and_failure():
    received = []
    errors = []

    ok = LocationProvider(FakeSource("native", Position(-15.8, -47.9)), None)
    result = ok.get_current_location(LocationOptions(on_success=received.append, on_error=errors.append))
    assert result is not None
    assert received == [result]

    failing = LocationProvider(None, FakeSource("browser", error=PositionError(3)))
    assert failing.get_current_location(LocationOptions(on_success=received.append, on_error=errors.append)) is None
    assert len(received) == 1
    assert isinstance(errors[0], LocationTimeout)


@pytest.mark.parametrize("failure", [RuntimeError("plugin crashed"), ValueError("bad fix"), TypeError("oops")])
def test_any_native_failure_falls_back_to_browser(failure):
    native = FakeSource("native", error=failure)
    browser = FakeSource("browser", Position(-15.81, -48.06))
    notifier = Notifier()

    result = LocationProvider(native, browser, notifier).locate(timeout=10.0)

    assert result.used_fallback is True
    assert len(browser.calls) == 1
    assert [n.level for n in notifier.history] == [NotificationLevel.SUCCESS]


def test_unexpected_browser_failure_gets_generic_notification():
    native = FakeSource("native", error=PositionError(2))
    browser = FakeSource("browser", error=RuntimeError("geolocation service crashed"))
    notifier = Notifier()
    provider = LocationProvider(native, browser, notifier, user_agent=IPHONE_UA)

    with pytest.raises(LocationUnavailable) as exc_info:
        provider.locate(timeout=10.0)

    assert exc_info.value.kind is LocationErrorKind.UNKNOWN
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert len(notifier.history) == 1
    assert notifier.history[0].title == "❌ Erro ao Obter Localização"
    assert notifier.history[0].duration_ms == 5000
