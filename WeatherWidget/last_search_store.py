"""Persistence of the last successfully searched city."""
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

LAST_SEARCH_KEY = "lastSearch"
DEFAULT_STATE_FILE = os.path.join(os.path.expanduser("~"), ".weather_widget.json")


class LastSearchStoreBase(ABC):
    """Abstract single-record store for the last searched city."""

    @abstractmethod
    def save(self, city_name: str) -> None:
        """Overwrite the stored city."""
        pass

    @abstractmethod
    def load(self) -> Optional[str]:
        """
        Read the stored city.

        Returns:
            Optional[str]: Last saved city, or None if nothing was ever saved
        """
        pass


class FileLastSearchStore(LastSearchStoreBase):
    """Stores the record as ``{"lastSearch": "<city>"}`` in a JSON file."""

    def __init__(self, path: str = DEFAULT_STATE_FILE):
        self.path = os.path.expanduser(path)

    def save(self, city_name: str) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({LAST_SEARCH_KEY: city_name}, f)
        logging.debug("Saved last search %r to %s", city_name, self.path)

    def load(self) -> Optional[str]:
        if not os.path.exists(self.path):
            logging.debug("No state file at %s", self.path)
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logging.warning("Ignoring unreadable state file %s: %s", self.path, exc)
            return None

        value = data.get(LAST_SEARCH_KEY) if isinstance(data, dict) else None
        if not isinstance(value, str) or not value:
            return None
        logging.debug("Loaded last search %r from %s", value, self.path)
        return value


class MemoryLastSearchStore(LastSearchStoreBase):
    """
    In-memory store - nothing survives the process.

    Useful for unit tests and for running without a state file.
    """

    def __init__(self, initial: Optional[str] = None):
        self._value = initial
        self.save_count = 0

    def save(self, city_name: str) -> None:
        self._value = city_name
        self.save_count += 1

    def load(self) -> Optional[str]:
        return self._value or None
