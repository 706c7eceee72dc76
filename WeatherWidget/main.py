"""Interactive weather lookup widget for the terminal."""
import argparse
import locale
import logging
import os
import signal
import sys
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

from last_search_store import DEFAULT_STATE_FILE, FileLastSearchStore
from layout import render_view, view_lines
from openweather_provider import OpenWeatherProvider
from presentation_controller import PresentationController
from ui_state import WidgetView
from widget_canvas import PILWidgetCanvas

PROMPT = "City (Ctrl-D to quit): "


@dataclass
class WidgetConfig:
    api_key: str
    state_file: str
    presentation_delay: float
    finalize_delay: float
    timeout: float


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("Weather lookup widget")
    parser.add_argument("--city", help="Search this city once and exit")
    parser.add_argument("--state-file", help="Where the last searched city is kept")
    parser.add_argument("--presentation-delay", type=float, help="Seconds before a result is shown")
    parser.add_argument("--finalize-delay", type=float, help="Seconds before the loading indicator is hidden")
    parser.add_argument("--timeout", type=float, default=10.0, help="HTTP timeout in seconds")
    parser.add_argument("--snapshot", help="Also render the widget to this PNG file")
    parser.add_argument("--log-file")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def setup_locale() -> None:
    """Use the host locale for %X/%x time and date formatting."""
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as exc:
        logging.warning("Could not apply host locale, using C conventions: %s", exc)


def _delay(value: Optional[float], env_name: str) -> float:
    if value is None:
        raw = os.getenv(env_name, "2.0")
        try:
            value = float(raw)
        except ValueError as exc:
            raise SystemExit(f"Invalid {env_name}: {raw!r}") from exc
    if value < 0:
        raise SystemExit(f"{env_name} must not be negative")
    return value


def load_config(args: argparse.Namespace) -> WidgetConfig:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    config = WidgetConfig(
        api_key=api_key,
        state_file=args.state_file or os.getenv("WEATHER_STATE_FILE", DEFAULT_STATE_FILE),
        presentation_delay=_delay(args.presentation_delay, "WEATHER_PRESENTATION_DELAY"),
        finalize_delay=_delay(args.finalize_delay, "WEATHER_FINALIZE_DELAY"),
        timeout=args.timeout,
    )
    logging.info(
        "Configuration loaded: state_file=%s presentation_delay=%ss finalize_delay=%ss",
        config.state_file,
        config.presentation_delay,
        config.finalize_delay,
    )
    return config


def build_controller(config: WidgetConfig) -> PresentationController:
    provider = OpenWeatherProvider(
        api_key=config.api_key,
        units="metric",
        timeout=config.timeout,
    )
    return PresentationController(
        provider=provider,
        store=FileLastSearchStore(config.state_file),
        presentation_delay=config.presentation_delay,
        finalize_delay=config.finalize_delay,
    )


class TerminalView:
    """Prints each published view; optionally keeps a PNG snapshot up to date."""

    def __init__(self, controller: PresentationController, snapshot: Optional[str] = None, out=None):
        self.controller = controller
        self.snapshot = snapshot
        self.out = out or sys.stdout
        self._canvas = PILWidgetCanvas() if snapshot else None

    def __call__(self, view: WidgetView) -> None:
        now = self.controller.clock()
        lines = view_lines(view, now)
        theme = view.theme
        print(
            f"--- [{theme.name} {theme.background_hex}/{theme.foreground_hex}] " + "-" * 30,
            file=self.out,
        )
        for line in lines:
            print(line, file=self.out)
        self.out.flush()

        if self._canvas is not None:
            render_view(self._canvas, view, now)
            self._canvas.save(self.snapshot)
            logging.debug("Snapshot written to %s", self.snapshot)


def prompt_loop(controller: PresentationController) -> None:
    while True:
        try:
            raw = input(PROMPT)
        except EOFError:
            print()
            return
        try:
            controller.search(raw)
        except Exception as exc:
            logging.exception("Unexpected error: %s", exc)
            print("Something went wrong, please try again.")


def signal_handler(signum, frame):
    logging.info("Received signal %s, shutting down", signum)
    raise KeyboardInterrupt()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    setup_locale()
    config = load_config(args)

    controller = build_controller(config)
    controller.subscribe(TerminalView(controller, snapshot=args.snapshot))

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        if args.city is not None:
            controller.search(args.city)
            return
        try:
            controller.start()
        except Exception as exc:
            logging.exception("Restoring previous search failed: %s", exc)
            print("Something went wrong, please try again.")
        prompt_loop(controller)
    except KeyboardInterrupt:
        logging.info("Stopping widget")


if __name__ == "__main__":
    main()
