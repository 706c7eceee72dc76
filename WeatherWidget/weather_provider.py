"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from weather_data import WeatherResult


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def fetch_weather(self, city_name: str) -> "WeatherResult":
        """
        Fetch current weather for a city.

        Args:
            city_name: City query as typed by the user (e.g. "London, GB")

        Returns:
            WeatherResult: Current weather information

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather lookup fails."""
    pass


class EmptyInputError(WeatherProviderError):
    """Raised for a blank city query; no request is made."""

    def __init__(self, message: str = "Please enter a city name."):
        super().__init__(message)


class NotFoundError(WeatherProviderError):
    """Raised for any non-2xx response from the weather API."""

    def __init__(self, message: str = "City not found"):
        super().__init__(message)


class MalformedResponseError(WeatherProviderError):
    """Raised when a 2xx body is not JSON or does not match the expected schema."""
    pass


class NetworkError(WeatherProviderError):
    """Raised when the request never produced an HTTP response."""
    pass
