import os
import pathlib
import typing

DEFAULT_MAX_DEPTH = 3
DEFAULT_AUTOADD_DIR = "auto-add"

_TRUE_VALUES = ("1", "true", "yes", "on")


def env_int(name: str) -> typing.Optional[int]:
    """Positive integer from the environment, None when unset or invalid."""
    try:
        parsed = int(os.getenv(name, "").strip())
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def env_flag(name: str) -> bool:
    raw = os.getenv(name)
    if not raw:
        return False
    return raw.strip().lower() in _TRUE_VALUES


def max_depth() -> int:
    return env_int("WBZCONV_MAX_DEPTH") or DEFAULT_MAX_DEPTH


def autoadd_path(cli_arg: "str | None" = None) -> pathlib.Path:
    path_spec = cli_arg or os.getenv("WBZCONV_AUTOADD") or DEFAULT_AUTOADD_DIR
    return pathlib.Path(path_spec).expanduser()


def verbose_enabled() -> bool:
    return env_flag("WBZCONV_VERBOSE")


def plain_output() -> bool:
    if os.getenv("NO_COLOR"):
        return True
    return env_flag("WBZCONV_CLI_PLAIN")
