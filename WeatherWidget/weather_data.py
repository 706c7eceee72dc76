"""Weather domain model - immutable data decoded from the OpenWeather API."""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from weather_provider import EmptyInputError, MalformedResponseError

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon_code}@2x.png"


@dataclass(frozen=True)
class WeatherQuery:
    """A validated city lookup."""
    city_name: str

    @classmethod
    def from_input(cls, raw: Optional[str]) -> "WeatherQuery":
        """
        Build a query from raw user input.

        Surrounding whitespace is dropped. A "City, CC" style query is kept
        verbatim; the country part is not validated.

        Raises:
            EmptyInputError: If nothing is left after trimming
        """
        city_name = (raw or "").strip()
        if not city_name:
            raise EmptyInputError()
        return cls(city_name=city_name)


@dataclass(frozen=True)
class WeatherResult:
    """Current weather for one city, as shown by the widget."""
    name: str
    country_code: str
    temperature_c: float
    feels_like_c: float
    humidity_pct: float
    condition_description: str  # e.g., "broken clouds", "light rain"
    icon_code: str  # e.g., "04d"
    observed_at: int  # UNIX timestamp (UTC)
    sunrise: int  # UNIX timestamp (UTC)
    sunset: int  # UNIX timestamp (UTC)

    # Present in the API response but not needed for rendering
    condition_main: Optional[str] = None  # e.g., "Clouds", "Rain", "Clear"
    temp_min_c: Optional[float] = None
    temp_max_c: Optional[float] = None
    wind_speed: Optional[float] = None  # m/s with metric units

    @property
    def icon_url(self) -> str:
        return ICON_URL_TEMPLATE.format(icon_code=self.icon_code)

    @classmethod
    def from_api(cls, payload: Any) -> "WeatherResult":
        """
        Decode an OpenWeather current-weather response.

        Args:
            payload: Parsed JSON body

        Returns:
            WeatherResult: The decoded result

        Raises:
            MalformedResponseError: If a required field is missing or a field
                has the wrong type
        """
        data = _require_object(payload, "response")
        weather_array = _require(data, "weather", list)
        if not weather_array:
            raise MalformedResponseError("Response missing 'weather' array")
        weather = _require_object(weather_array[0], "weather[0]")
        main = _require(data, "main", dict)
        sys_block = _require(data, "sys", dict)
        wind = data.get("wind")
        if wind is not None:
            wind = _require_object(wind, "wind")

        return cls(
            name=_require(data, "name", str),
            country_code=_require(sys_block, "country", str, "sys."),
            temperature_c=_require_number(main, "temp", "main."),
            feels_like_c=_require_number(main, "feels_like", "main."),
            humidity_pct=_require_number(main, "humidity", "main."),
            condition_description=_require(weather, "description", str, "weather[0]."),
            icon_code=_require(weather, "icon", str, "weather[0]."),
            observed_at=_require_timestamp(data, "dt"),
            sunrise=_require_timestamp(sys_block, "sunrise", "sys."),
            sunset=_require_timestamp(sys_block, "sunset", "sys."),
            condition_main=_optional(weather, "main", str, "weather[0]."),
            temp_min_c=_optional_number(main, "temp_min", "main."),
            temp_max_c=_optional_number(main, "temp_max", "main."),
            wind_speed=_optional_number(wind, "speed", "wind.") if wind else None,
        )


def _require_object(value: Any, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedResponseError(f"Expected an object at '{path}'")
    return value


def _require(block: Dict[str, Any], key: str, kind, prefix: str = "") -> Any:
    if key not in block or block[key] is None:
        raise MalformedResponseError(f"Response missing '{prefix}{key}'")
    return _check(block[key], kind, prefix + key)


def _optional(block: Dict[str, Any], key: str, kind, prefix: str = "") -> Any:
    if block.get(key) is None:
        return None
    return _check(block[key], kind, prefix + key)


def _check(value: Any, kind, path: str) -> Any:
    # bool is an int subclass; JSON true/false is never a valid number here
    if isinstance(value, bool) or not isinstance(value, kind):
        raise MalformedResponseError(
            f"Field '{path}' has type {type(value).__name__}, expected {_type_name(kind)}"
        )
    return value


def _type_name(kind) -> str:
    if isinstance(kind, tuple):
        return "number"
    return kind.__name__


def _require_number(block: Dict[str, Any], key: str, prefix: str = "") -> float:
    return float(_require(block, key, (int, float), prefix))


def _optional_number(block: Dict[str, Any], key: str, prefix: str = "") -> Optional[float]:
    value = _optional(block, key, (int, float), prefix)
    return None if value is None else float(value)


def _require_timestamp(block: Dict[str, Any], key: str, prefix: str = "") -> int:
    return _require(block, key, int, prefix)
