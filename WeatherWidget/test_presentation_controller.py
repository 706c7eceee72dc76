"""Tests for the presentation state machine."""
import pytest
from last_search_store import FileLastSearchStore, MemoryLastSearchStore
from presentation_controller import PresentationController
from theme import DEFAULT_THEME, THEMES
from ui_state import UiStatus
from weather_data import WeatherResult
from weather_provider import MalformedResponseError, NotFoundError, WeatherProviderBase


def make_result(description="light rain", name="London"):
    return WeatherResult(
        name=name,
        country_code="GB",
        temperature_c=12.5,
        feels_like_c=11.8,
        humidity_pct=81.0,
        condition_description=description,
        icon_code="10d",
        observed_at=1684929490,
        sunrise=1684900531,
        sunset=1684958917,
    )


class MockProvider(WeatherProviderBase):
    """Mock weather provider for testing."""

    def __init__(self, return_data=None, raise_error=None, events=None):
        self.return_data = return_data
        self.raise_error = raise_error
        self.events = events if events is not None else []
        self.calls = []

    def fetch_weather(self, city_name):
        self.calls.append(city_name)
        self.events.append(("fetch", city_name))
        if self.raise_error:
            raise self.raise_error
        return self.return_data


class RecordingStore(MemoryLastSearchStore):
    def __init__(self, initial=None, events=None):
        super().__init__(initial)
        self.events = events if events is not None else []

    def save(self, city_name):
        self.events.append(("save", city_name))
        super().save(city_name)


@pytest.fixture
def events():
    return []


@pytest.fixture
def store(events):
    return RecordingStore(events=events)


def make_controller(provider, store, events=None, delay=0.0):
    recorded = events if events is not None else []
    controller = PresentationController(
        provider=provider,
        store=store,
        presentation_delay=delay,
        finalize_delay=delay,
        sleep=lambda seconds: recorded.append(("sleep", seconds)),
        clock=lambda: 1684929490 + 60,
    )
    controller.subscribe(lambda view: recorded.append(("view", view)))
    return controller


def test_initial_view_is_idle(store):
    controller = make_controller(MockProvider(make_result()), store)

    assert controller.view.state.status is UiStatus.IDLE
    assert controller.view.loading_visible is False
    assert controller.view.theme is DEFAULT_THEME


def test_successful_search_displays_and_persists(store):
    provider = MockProvider(make_result())
    controller = make_controller(provider, store)

    view = controller.search("  London ")

    assert provider.calls == ["London"]
    assert view.state.status is UiStatus.DISPLAYING
    assert view.state.result.name == "London"
    assert view.loading_visible is False
    assert view.city_input == "London"
    assert store.load() == "London"


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_empty_input_errors_without_network_call(store, raw):
    provider = MockProvider(make_result())
    controller = make_controller(provider, store)

    view = controller.search(raw)

    assert provider.calls == []
    assert view.state.status is UiStatus.ERROR
    assert view.state.message == "Please enter a city name."
    assert view.loading_visible is False
    assert store.save_count == 0


def test_not_found_shows_message_and_keeps_store(events):
    store = RecordingStore(initial="Paris", events=events)
    provider = MockProvider(raise_error=NotFoundError())
    controller = make_controller(provider, store)

    view = controller.search("Atlantis")

    assert view.state.status is UiStatus.ERROR
    assert view.state.message == "City not found"
    assert view.loading_visible is False
    assert store.load() == "Paris"
    assert store.save_count == 0


def test_malformed_response_does_not_persist(store):
    provider = MockProvider(raise_error=MalformedResponseError("Response missing 'main'"))
    controller = make_controller(provider, store)

    view = controller.search("London")

    assert view.state.status is UiStatus.ERROR
    assert view.state.message == "Response missing 'main'"
    assert store.load() is None


def test_success_ordering(events, store):
    """Persist, wait, display, wait, hide the loading indicator."""
    provider = MockProvider(make_result(), events=events)
    controller = make_controller(provider, store, events=events, delay=2.0)

    controller.search("London")

    steps = []
    for kind, value in events:
        if kind == "view":
            steps.append(("view", value.state.status, value.loading_visible))
        else:
            steps.append((kind, value))

    assert steps == [
        ("view", UiStatus.LOADING, True),
        ("fetch", "London"),
        ("save", "London"),
        ("sleep", 2.0),
        ("view", UiStatus.DISPLAYING, True),
        ("sleep", 2.0),
        ("view", UiStatus.DISPLAYING, False),
    ]


def test_error_ordering(events, store):
    """The loading indicator is hidden after the finalize delay on failure too."""
    provider = MockProvider(raise_error=NotFoundError(), events=events)
    controller = make_controller(provider, store, events=events, delay=2.0)

    controller.search("Atlantis")

    steps = [
        (kind, value.state.status, value.loading_visible) if kind == "view" else (kind, value)
        for kind, value in events
    ]
    assert steps == [
        ("view", UiStatus.LOADING, True),
        ("fetch", "Atlantis"),
        ("view", UiStatus.ERROR, True),
        ("sleep", 2.0),
        ("view", UiStatus.ERROR, False),
    ]


def test_loading_clears_previous_result_and_theme(events, store):
    provider = MockProvider(make_result("light rain"))
    controller = make_controller(provider, store, events=events)
    controller.search("London")
    assert controller.view.theme is THEMES["rain"]

    events.clear()
    provider.return_data = make_result("scattered clouds")
    controller.search("London")

    loading_view = events[0][1]
    assert loading_view.state.status is UiStatus.LOADING
    assert loading_view.state.result is None
    assert loading_view.theme is DEFAULT_THEME
    assert controller.view.theme is THEMES["clouds"]


@pytest.mark.parametrize("description, expected", [
    ("light rain", THEMES["rain"]),
    ("scattered clouds", THEMES["clouds"]),
    ("clear sky", THEMES["clear"]),
    ("mist", DEFAULT_THEME),
])
def test_theme_follows_condition(store, description, expected):
    controller = make_controller(MockProvider(make_result(description)), store)

    controller.search("London")

    assert controller.view.theme is expected


def test_unmatched_condition_after_themed_result_resets_to_default(store):
    provider = MockProvider(make_result("light rain"))
    controller = make_controller(provider, store)
    controller.search("London")

    provider.return_data = make_result("mist")
    controller.search("London")

    assert controller.view.theme is DEFAULT_THEME


def test_unexpected_error_propagates_after_finalizing(store):
    provider = MockProvider(raise_error=RuntimeError("boom"))
    controller = make_controller(provider, store)

    with pytest.raises(RuntimeError):
        controller.search("London")

    assert controller.view.loading_visible is False
    assert store.load() is None

    # The in-flight guard was released
    provider.raise_error = None
    provider.return_data = make_result()
    assert controller.search("London").state.status is UiStatus.DISPLAYING


def test_overlapping_search_is_rejected(store):
    """A search started while another is in flight is ignored."""
    controller = None
    nested_views = []

    class ReentrantProvider(MockProvider):
        def fetch_weather(self, city_name):
            result = super().fetch_weather(city_name)
            nested_views.append(controller.search("Paris"))
            return result

    provider = ReentrantProvider(make_result())
    controller = make_controller(provider, store)

    view = controller.search("London")

    assert provider.calls == ["London"]
    assert nested_views[0].state.status is UiStatus.LOADING
    assert view.state.result.name == "London"
    assert store.load() == "London"


def test_start_restores_previous_city(events):
    store = RecordingStore(initial="Tokyo", events=events)
    provider = MockProvider(make_result(name="Tokyo"))
    controller = make_controller(provider, store)

    view = controller.start()

    assert provider.calls == ["Tokyo"]
    assert view.city_input == "Tokyo"
    assert view.state.status is UiStatus.DISPLAYING


def test_start_runs_once(events):
    store = RecordingStore(initial="Tokyo", events=events)
    provider = MockProvider(make_result(name="Tokyo"))
    controller = make_controller(provider, store)

    controller.start()
    controller.start()

    assert provider.calls == ["Tokyo"]


def test_start_without_history_stays_idle(store):
    provider = MockProvider(make_result())
    controller = make_controller(provider, store)

    view = controller.start()

    assert provider.calls == []
    assert view.state.status is UiStatus.IDLE


def test_listeners_only_see_changes(events, store):
    controller = make_controller(MockProvider(raise_error=NotFoundError()), store, events=events)

    controller.search("")
    controller.search("")

    views = [value for kind, value in events if kind == "view"]
    assert len(views) == 1


class FailingStore(MemoryLastSearchStore):
    def save(self, city_name):
        raise PermissionError(13, "Permission denied")


def test_failed_save_ends_in_error_state():
    """A store that cannot be written still leaves the widget in Error."""
    store = FailingStore()
    controller = make_controller(MockProvider(make_result()), store)

    view = controller.search("London")

    assert view.state.status is UiStatus.ERROR
    assert view.state.message == "Could not save last search: Permission denied"
    assert view.loading_visible is False
    assert store.load() is None


def test_failed_file_save_ends_in_error_state(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = FileLastSearchStore(str(blocker / "state.json"))
    controller = make_controller(MockProvider(make_result()), store)

    view = controller.search("London")

    assert view.state.status is UiStatus.ERROR
    assert view.state.message.startswith("Could not save last search")
    assert view.loading_visible is False


def test_empty_input_keeps_previous_city_input(store):
    controller = make_controller(MockProvider(make_result()), store)
    controller.search("London")

    view = controller.search("   ")

    assert view.state.status is UiStatus.ERROR
    assert view.city_input == "London"
