"""Presentation state - immutable values published by the controller."""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from theme import DEFAULT_THEME, Theme
from weather_data import WeatherResult


class UiStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    DISPLAYING = "displaying"
    ERROR = "error"


@dataclass(frozen=True)
class UiState:
    """One of Idle, Loading, Displaying(result) or Error(message)."""
    status: UiStatus
    result: Optional[WeatherResult] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "UiState":
        return cls(UiStatus.IDLE)

    @classmethod
    def loading(cls) -> "UiState":
        return cls(UiStatus.LOADING)

    @classmethod
    def displaying(cls, result: WeatherResult) -> "UiState":
        return cls(UiStatus.DISPLAYING, result=result)

    @classmethod
    def error(cls, message: str) -> "UiState":
        return cls(UiStatus.ERROR, message=message)


@dataclass(frozen=True)
class WidgetView:
    """Everything the widget shows at one moment."""
    state: UiState = UiState.idle()
    theme: Theme = DEFAULT_THEME
    loading_visible: bool = False
    city_input: str = ""

    def evolve(self, **changes) -> "WidgetView":
        return replace(self, **changes)
