"""Command-line weather client: help | configure [provider] | get [provider] <address> [date=format]."""
import logging
import os
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple, Union

from dotenv import load_dotenv

from credential_store import DEFAULT_KEY_FILE, CredentialStore
from date_resolver import local_now, parse_target_date
from forecast_formatter import format_report
from provider_registry import ProviderRegistry
from weather_errors import WeatherError
from weather_provider import DEFAULT_TIMEOUT
from weather_service import WeatherService

__version__ = "0.1.0"

PROVIDER_PREFIX = "provider="
DATE_PREFIX = "date="

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2

HELP_TEXT = """weather: command-line weather forecasts v:{version}
Usage: weather help | configure [provider] | get [provider] <address> [date=format]

  help                      - Shows this help message
  configure                 - Lists the available providers and allows to set the default
  configure <provider>      - Configures credentials for the selected provider
  get <address>             - Displays weather for the address using the default provider
  get [provider] <address>  - Displays weather for the address using the given provider
                              (written as provider=<name>)
      [date=format]         - Displays weather for the specified date

  format = now | yyyy-mm-dd | yyyy-mm-ddThh:mm:ss
    now                     - Current date and time
    yyyy-mm-dd              - The specified date at the current time of day
    yyyy-mm-ddThh:mm:ss     - The specified date and time

Examples:
  weather get Kyiv, Ukraine
  weather get provider=AccuWeather Kyiv, Ukraine date=2023-05-11
  weather get provider=AccuWeather Kyiv, Ukraine date=2023-05-11T11:00:20

Providers rarely offer data for an exact timestamp, so the forecast closest
to the requested date is shown.

API keys are stored unencrypted in {key_file}."""


@dataclass(frozen=True)
class HelpCommand:
    error: bool = False


@dataclass(frozen=True)
class ListCommand:
    pass


@dataclass(frozen=True)
class ConfigureCommand:
    provider: str


@dataclass(frozen=True)
class GetCommand:
    address: str
    provider: Optional[str] = None
    date: Optional[str] = None  # raw value after "date=", None if not given


Command = Union[HelpCommand, ListCommand, ConfigureCommand, GetCommand]


def parse_args(argv: Sequence[str]) -> Command:
    """Recognize the launch command from positional tokens."""
    tokens = [token for token in argv if token.strip()]
    if not tokens or tokens[0] == "help":
        return HelpCommand()
    if tokens[0] == "configure":
        return ConfigureCommand(tokens[1]) if len(tokens) > 1 else ListCommand()
    if tokens[0] == "get":
        return parse_get(tokens[1:])
    return HelpCommand(error=True)


def parse_get(tokens: List[str]) -> Command:
    """
    Split "get" tokens into provider, address and date.

    provider= may only lead and date= may only trail; everything between
    them, joined by single spaces, is the address. An empty provider= means
    the default provider and an empty date= means now.
    """
    provider = None
    date = None
    if tokens and tokens[0].startswith(PROVIDER_PREFIX):
        provider = tokens[0][len(PROVIDER_PREFIX):] or None
        tokens = tokens[1:]
    if tokens and tokens[-1].startswith(DATE_PREFIX):
        date = tokens[-1][len(DATE_PREFIX):]
        tokens = tokens[:-1]

    address = " ".join(token.strip() for token in tokens)
    if not address or address.startswith((PROVIDER_PREFIX, DATE_PREFIX)):
        return HelpCommand(error=True)
    return GetCommand(address=address, provider=provider, date=date)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    # urllib3 logs full request lines, query string and API key included
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def load_config() -> Tuple[str, float, Optional[str], bool]:
    load_dotenv()
    key_file = os.getenv("WEATHER_KEY_FILE", DEFAULT_KEY_FILE)
    timeout = os.getenv("WEATHER_TIMEOUT", str(DEFAULT_TIMEOUT))
    log_file = os.getenv("WEATHER_LOG_FILE") or None
    verbose = os.getenv("WEATHER_VERBOSE", "").strip().lower() in ("1", "true", "yes")

    try:
        timeout_val = float(timeout)
    except ValueError as exc:
        raise SystemExit(f"Invalid WEATHER_TIMEOUT: {exc}") from exc
    if timeout_val <= 0:
        raise SystemExit("Invalid WEATHER_TIMEOUT: must be positive")

    return key_file, timeout_val, log_file, verbose


def show_help(error: bool, argv: Sequence[str], key_file: str) -> int:
    if error:
        print(f"weather: {' '.join(argv)}: unrecognized command", file=sys.stderr)
        print("For help information, type: \"weather help\"", file=sys.stderr)
        return EXIT_USAGE
    print(HELP_TEXT.format(version=__version__, key_file=key_file))
    return EXIT_OK


def _prompt(input_fn: Callable[[str], str], message: str) -> str:
    try:
        return input_fn(message).strip()
    except EOFError:
        return ""


def list_providers(registry: ProviderRegistry, input_fn: Callable[[str], str] = input) -> int:
    """Show the providers, mark the default and let the user pick a new one."""
    store = registry.store
    names = registry.list()
    current = store.get_default()
    current_name = None
    if current:
        try:
            current_name = registry.canonical_name(current)
        except WeatherError:
            logging.warning(f"Stored default provider {current!r} is not a known provider")

    print("Weather can be obtained through the following providers:")
    for index, name in enumerate(names, start=1):
        marker = "*" if name == current_name else " "
        print(f"  {marker}{index} - {name}")
    choice = _prompt(
        input_fn,
        f"* - default provider.\nPlease set the new default provider [Integer from 1 to {len(names)}]: ",
    )

    if not choice:
        if current_name:
            print(f"The '{current_name}' provider was left as the default.")
        else:
            print("No default provider was set.")
        return EXIT_OK

    if not choice.isdigit() or not 1 <= int(choice) <= len(names):
        raise WeatherError(f"The choice must be an integer from 1 to {len(names)}.")

    chosen = names[int(choice) - 1]
    store.set_default(chosen)
    print(f"The '{chosen}' provider is now the default.")
    return EXIT_OK


def configure_provider(
    registry: ProviderRegistry,
    provider: str,
    input_fn: Callable[[str], str] = input,
) -> int:
    """Prompt for and store the API key of one provider; empty input removes it."""
    store = registry.store
    name = registry.canonical_name(provider)
    current = store.get_credential(name)

    print(f"Configure credentials for {name}:\n")
    hint = " (as client_id:client_secret)" if name == "AerisWeather" else ""
    if current:
        message = f"Please enter the API key{hint}. Current key={current}: "
    else:
        message = f"Please enter the API key{hint}: "
    key = _prompt(input_fn, message)

    if key:
        store.set_credential(name, key)
        print(f"The key for {name} was saved.")
    else:
        store.remove_credential(name)
        print(f"The key for {name} was removed.")
    return EXIT_OK


def get_weather(registry: ProviderRegistry, command: GetCommand) -> int:
    # A malformed date must fail before the provider is contacted
    target = parse_target_date(command.date, now=local_now())
    target_is_now = (command.date or "").strip().lower() in ("", "now")

    report = WeatherService(registry).get_weather(
        address=command.address,
        target=target,
        provider_name=command.provider,
        target_is_now=target_is_now,
    )
    print("\n".join(format_report(report)))
    return EXIT_OK


def run(
    argv: Sequence[str],
    registry: ProviderRegistry,
    input_fn: Callable[[str], str] = input,
) -> int:
    """Execute one command and return the process exit code."""
    command = parse_args(argv)
    logging.debug(f"Parsed command: {command}")
    try:
        if isinstance(command, HelpCommand):
            return show_help(command.error, argv, registry.store.path)
        if isinstance(command, ListCommand):
            return list_providers(registry, input_fn)
        if isinstance(command, ConfigureCommand):
            return configure_provider(registry, command.provider, input_fn)
        return get_weather(registry, command)
    except WeatherError as err:
        logging.debug("Command failed", exc_info=True)
        print(f"weather: {err}", file=sys.stderr)
        return EXIT_ERROR


def main(argv: Optional[Sequence[str]] = None) -> None:
    argv = sys.argv[1:] if argv is None else list(argv)
    key_file, timeout, log_file, verbose = load_config()
    setup_logging(log_file, verbose)

    registry = ProviderRegistry(CredentialStore(key_file), timeout=timeout)
    try:
        code = run(argv, registry)
    except KeyboardInterrupt:
        logging.info("Interrupted")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
