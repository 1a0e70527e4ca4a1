"""Plaintext key file holding provider API keys and the default provider."""
import logging
import os
from typing import Dict, Optional, Tuple

DEFAULT_KEY_FILE = "key.txt"


class CredentialStore:
    """
    Read and write ``key.txt``.

    File layout: the first line names the default provider (may be empty),
    every following line is ``ProviderName:api-key``. Only the first colon
    separates name and key, so keys such as AerisWeather's
    ``client_id:client_secret`` survive unchanged.

    Keys are stored unencrypted. The file is opened and closed on every call.
    """

    def __init__(self, path: str = DEFAULT_KEY_FILE):
        self.path = path

    def get_credential(self, provider: str) -> Optional[str]:
        _, keys = self._load()
        return keys.get(provider)

    def set_credential(self, provider: str, key: str) -> None:
        default, keys = self._load()
        keys[provider] = key
        self._save(default, keys)
        logging.info(f"Stored API key for {provider} in {self.path}")

    def remove_credential(self, provider: str) -> None:
        default, keys = self._load()
        if keys.pop(provider, None) is not None:
            self._save(default, keys)
            logging.info(f"Removed API key for {provider} from {self.path}")

    def get_default(self) -> Optional[str]:
        default, _ = self._load()
        return default

    def set_default(self, provider: str) -> None:
        _, keys = self._load()
        self._save(provider, keys)
        logging.info(f"Default provider set to {provider}")

    def _load(self) -> Tuple[Optional[str], Dict[str, str]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except FileNotFoundError:
            logging.debug(f"Key file {self.path} does not exist yet")
            return None, {}

        if not lines:
            return None, {}

        default = lines[0].strip() or None
        keys: Dict[str, str] = {}
        for number, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue
            name, sep, key = line.partition(":")
            if not sep or not name.strip():
                logging.warning(f"Ignoring malformed line {number} in {self.path}")
                continue
            if key:
                keys[name.strip()] = key.strip()
        return default, keys

    def _save(self, default: Optional[str], keys: Dict[str, str]) -> None:
        if not os.path.exists(self.path):
            logging.warning(f"API keys are stored unencrypted in {self.path}")
        lines = [default or ""]
        lines.extend(f"{name}:{key}" for name, key in keys.items())
        with open(self.path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
