"""Request lifecycle and presentation state machine for the weather widget."""
import logging
import threading
import time
from typing import Callable, List, Optional

from last_search_store import LastSearchStoreBase
from theme import DEFAULT_THEME, select_theme
from ui_state import UiState, WidgetView
from weather_data import WeatherQuery
from weather_provider import EmptyInputError, WeatherProviderBase, WeatherProviderError

ViewListener = Callable[[WidgetView], None]


class PresentationController:
    """
    Drives one search at a time through Idle -> Loading -> Displaying/Error.

    A successful lookup is persisted as soon as it is known to be usable,
    then shown after ``presentation_delay``. The loading indicator is hidden
    after ``finalize_delay`` whatever the outcome. Both delays exist only to
    keep the loading state visible; set them to 0 in tests.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        store: LastSearchStoreBase,
        presentation_delay: float = 2.0,
        finalize_delay: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the controller.

        Args:
            provider: Weather provider used for lookups
            store: Where the last successful city is kept
            presentation_delay: Seconds between a successful response and rendering it
            finalize_delay: Seconds before the loading indicator is hidden
            sleep: Blocking sleep function (injectable for tests)
            clock: Current time in UNIX seconds (used when rendering)
        """
        self.provider = provider
        self.store = store
        self.presentation_delay = presentation_delay
        self.finalize_delay = finalize_delay
        self.sleep = sleep
        self.clock = clock

        self._view = WidgetView()
        self._listeners: List[ViewListener] = []
        self._in_flight = threading.Lock()
        self._started = False

    @property
    def view(self) -> WidgetView:
        return self._view

    def subscribe(self, listener: ViewListener) -> None:
        """Register a callback that receives every published view."""
        self._listeners.append(listener)

    def start(self) -> WidgetView:
        """
        Restore the previous session, once.

        If a city was saved by an earlier run it is put back into the input
        and searched exactly as if the user had triggered it.
        """
        if self._started:
            logging.debug("Controller already started")
            return self._view
        self._started = True

        last_city = self.store.load()
        if not last_city:
            logging.info("No previous search to restore")
            return self._view

        logging.info("Restoring previous search: %s", last_city)
        return self.search(last_city)

    def search(self, raw_input: Optional[str]) -> WidgetView:
        """
        Run one lookup for the given input and return the final view.

        Provider failures end in the Error state with the failure's message.
        A search requested while another is still running is rejected.
        """
        if not self._in_flight.acquire(blocking=False):
            logging.warning("Search for %r ignored: another search is in progress", raw_input)
            return self._view

        try:
            return self._run(raw_input)
        finally:
            self._in_flight.release()

    def _run(self, raw_input: Optional[str]) -> WidgetView:
        try:
            query = WeatherQuery.from_input(raw_input)
        except EmptyInputError as err:
            logging.info("Rejected empty city input")
            return self._publish(self._view.evolve(state=UiState.error(str(err))))

        self._publish(self._view.evolve(
            city_input=query.city_name,
            state=UiState.loading(),
            theme=DEFAULT_THEME,
            loading_visible=True,
        ))

        try:
            result = self.provider.fetch_weather(query.city_name)
            self.store.save(query.city_name)
            logging.info("Weather received for %s, rendering in %.1fs", query.city_name, self.presentation_delay)
            self.sleep(self.presentation_delay)
            self._publish(self._view.evolve(
                state=UiState.displaying(result),
                theme=select_theme(result.condition_description, self._view.theme),
            ))
        except WeatherProviderError as err:
            logging.warning("Search for %r failed: %s", query.city_name, err)
            self._publish(self._view.evolve(state=UiState.error(str(err))))
        except OSError as err:
            # Raised by store.save; provider failures are WeatherProviderError
            logging.error("Could not save last search %r: %s", query.city_name, err)
            self._publish(self._view.evolve(
                state=UiState.error(f"Could not save last search: {err.strerror or err}"),
            ))
        finally:
            self.sleep(self.finalize_delay)
            self._publish(self._view.evolve(loading_visible=False))

        return self._view

    def _publish(self, view: WidgetView) -> WidgetView:
        if view == self._view:
            return view
        logging.debug(
            "View -> %s (loading=%s, theme=%s)",
            view.state.status.value,
            view.loading_visible,
            view.theme.name,
        )
        self._view = view
        for listener in self._listeners:
            listener(view)
        return view
