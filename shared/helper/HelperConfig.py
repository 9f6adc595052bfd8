"""Environment backed settings of the feed controller.

Every setting is an upper-case environment variable. An empty variable counts
as unset. A getter called without a default treats the setting as required.
"""

import logging
import os

from pytz import timezone, UnknownTimeZoneError
from pytz.tzinfo import BaseTzInfo


class HelperConfig:
    """Reads settings from the process environment and hands out the shared logger."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """
        Returns:
            str: The stripped value, or default if the variable is unset.

        Raises:
            ValueError: If the variable is unset and no default is given.
        """
        raw = self._lookup(key)
        if raw is None:
            return self._fallback(key, default)
        return raw

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read an int ("25") or float ("0.5") setting.

        Raises:
            ValueError: If the variable is unset without default, or not a number.
        """
        raw = self._lookup(key)
        if raw is None:
            return self._fallback(key, default)
        try:
            return float(raw) if "." in raw else int(raw)
        except ValueError:
            raise ValueError(f"Setting '{key.upper()}' must be a number, got '{raw}'.")

    def get_timezone_val(self, key: str, default: str | None = None) -> BaseTzInfo:
        """Read an IANA zone name such as "Europe/Berlin".

        Raises:
            ValueError: If the variable is unset without default, or names no known zone.
        """
        name = self.get_string_val(key, default=default)
        try:
            return timezone(name)
        except UnknownTimeZoneError:
            raise ValueError(f"Setting '{key.upper()}' names an unknown timezone: '{name}'.")

    def get_logger(self) -> logging.Logger:
        return self._logger

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _lookup(self, key: str) -> str | None:
        raw = os.getenv(key.upper())
        if raw is None or not raw.strip():
            return None
        return raw.strip()

    def _fallback(self, key: str, default):
        if default is None:
            raise ValueError(f"Required setting '{key.upper()}' is not set.")
        return default
