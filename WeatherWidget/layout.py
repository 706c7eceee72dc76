"""Layout and rendering logic for the widget - pure functions for testability."""
from typing import List

from time_format import to_absolute_locale, to_absolute_utc, to_relative
from ui_state import UiStatus, WidgetView
from weather_data import WeatherResult
from widget_canvas import WidgetCanvas

LOADING_TEXT = "Loading..."
LINE_HEIGHT = 18
MARGIN = 12


class DrawOp:
    """Represents a drawing operation (for testing/layout calculation)."""
    def __init__(self, op_type: str, **kwargs):
        self.op_type = op_type
        self.kwargs = kwargs


def format_number(value: float) -> str:
    """Render a reading without a trailing ".0" (20.0 -> "20", 20.5 -> "20.5")."""
    return f"{value:g}"


def weather_lines(weather: WeatherResult, now: float) -> List[str]:
    """
    Get the display lines for a weather result.

    Args:
        weather: Result to show
        now: Current time in UNIX seconds, for the "Last Checked" line

    Returns:
        List of text lines, top to bottom
    """
    return [
        f"Icon: {weather.icon_url}",
        f"City: {weather.name}, {weather.country_code}",
        f"Temperature: {format_number(weather.temperature_c)}°C",
        f"Feels Like: {format_number(weather.feels_like_c)}°C",
        f"Humidity: {format_number(weather.humidity_pct)}%",
        f"Condition: {weather.condition_description}",
        f"Last Checked: {to_relative(now, weather.observed_at)}",
        f"Checked at: {to_absolute_utc(weather.observed_at)}",
        f"Locale Time: {to_absolute_locale(weather.observed_at)}",
    ]


def view_lines(view: WidgetView, now: float) -> List[str]:
    """
    Project a widget view onto text lines.

    The loading indicator comes first when visible, followed by the display
    region: the weather fields, the error message, or nothing.
    """
    lines = []
    if view.loading_visible:
        lines.append(LOADING_TEXT)

    state = view.state
    if state.status is UiStatus.DISPLAYING and state.result is not None:
        lines.extend(weather_lines(state.result, now))
    elif state.status is UiStatus.ERROR and state.message:
        lines.append(state.message)
    return lines


def calculate_layout(view: WidgetView, now: float, width: int = 480, height: int = 320) -> List[DrawOp]:
    """
    Calculate layout operations for a widget view.

    This is a pure function that returns drawing operations,
    making it easy to test without actual rendering.

    Args:
        view: Widget view to display
        now: Current time in UNIX seconds
        width: Canvas width
        height: Canvas height

    Returns:
        List of DrawOp objects representing what to draw
    """
    ops = [DrawOp("fill", color=view.theme.background)]

    y = MARGIN
    for text in view_lines(view, now):
        # Lines that would start below the canvas are dropped
        if y + LINE_HEIGHT > height:
            break
        ops.append(DrawOp("text", text=text, x=MARGIN, y=y, color=view.theme.foreground))
        y += LINE_HEIGHT

    return ops


def render_view(canvas: WidgetCanvas, view: WidgetView, now: float) -> None:
    """
    Render a widget view onto a canvas.

    Args:
        canvas: WidgetCanvas instance (image or fake)
        view: Widget view to display
        now: Current time in UNIX seconds
    """
    for op in calculate_layout(view, now, canvas.width, canvas.height):
        if op.op_type == "fill":
            canvas.fill(op.kwargs["color"])
        elif op.op_type == "text":
            canvas.draw_text(op.kwargs["x"], op.kwargs["y"], op.kwargs["text"], op.kwargs["color"])
