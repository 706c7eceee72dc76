"""OpenWeather Current Weather API provider implementation."""
import logging
from urllib.parse import quote, urlencode

import requests

from weather_data import WeatherQuery, WeatherResult
from weather_provider import (
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    WeatherProviderBase,
)


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using OpenWeather Current Weather API by city name.

    Uses the free Current Weather API: https://openweathermap.org/current
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"

    def __init__(
        self,
        api_key: str,
        units: str = "metric",
        timeout: float = 10,
        base_url: str = BASE_URL,
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            units: Temperature units ("metric", "imperial", or "standard")
            timeout: HTTP request timeout in seconds
            base_url: Endpoint override (tests, proxies)
        """
        self.api_key = api_key
        self.units = units
        self.timeout = timeout
        self.base_url = base_url

    def build_url(self, city_name: str) -> str:
        """
        Build the request URL for a city.

        Every reserved character is percent-encoded (space as %20, comma as
        %2C, ampersand as %26) so the city reaches the API verbatim.
        """
        params = {
            "q": city_name,
            "appid": self.api_key,
            "units": self.units,
        }
        return f"{self.base_url}?{urlencode(params, quote_via=quote, safe='')}"

    def fetch_weather(self, city_name: str) -> WeatherResult:
        """
        Fetch current weather for a city from OpenWeather.

        Args:
            city_name: City query, optionally "City, CountryCode"

        Returns:
            WeatherResult: Current weather information

        Raises:
            EmptyInputError: If the city is blank (no request is made)
            NotFoundError: If the API answers with a non-2xx status
            MalformedResponseError: If a 2xx body cannot be decoded
            NetworkError: If no HTTP response was received
        """
        query = WeatherQuery.from_input(city_name)
        url = self.build_url(query.city_name)

        try:
            logging.info(f"Making OpenWeather API request: {self._redact(url)}")
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise NetworkError(f"Network error: {e}") from e

        logging.info(f"API response status: {response.status_code}")

        if not response.ok:
            logging.error(f"API request failed with status {response.status_code}")
            self._log_error_response(response)
            raise NotFoundError()

        try:
            data = response.json()
        except ValueError as e:
            logging.error(f"Failed to parse API response: {e}")
            raise MalformedResponseError(f"Failed to parse response: {e}") from e

        logging.debug(f"API response (truncated): {str(data)[:500]}...")

        try:
            result = WeatherResult.from_api(data)
        except MalformedResponseError as e:
            logging.error(f"Unexpected API response shape: {e}")
            raise

        logging.info(
            f"Successfully parsed weather data: {result.name}, {result.country_code} "
            f"{result.temperature_c}°C, {result.condition_description}"
        )
        return result

    def _redact(self, url: str) -> str:
        if not self.api_key:
            return url
        return url.replace(quote(self.api_key, safe=""), "***")

    def _log_error_response(self, response: requests.Response) -> None:
        """Log the OpenWeather error body; the user only ever sees 'City not found'."""
        try:
            error_data = response.json()
        except ValueError:
            logging.debug(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:200]}")
            return
        if isinstance(error_data, dict):
            logging.debug(
                f"OpenWeather API error {error_data.get('cod', response.status_code)}: "
                f"{error_data.get('message', 'Unknown error')}"
            )
