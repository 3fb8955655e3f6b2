"""Configuration loading from defaults, optional YAML file, env vars and CLI args."""

import os
import codecs
import logging
from dataclasses import dataclass, fields

import yaml

logger = logging.getLogger(__name__)

_ESCAPES = {"\\n": "\n", "\\r": "\r", "\\t": "\t", "\\0": "\0"}


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def parse_separator(value: str) -> str:
    """Translate backslash escapes typed on a command line (``\\n``, ``\\t``...)."""
    return _ESCAPES.get(value, value)


@dataclass(frozen=True)
class TailConfig:
    read_old: bool = False          # start from byte 0 instead of end of file
    emit_async: bool = False        # deliver records on the next tick
    separator: str | int = "\n"     # one character or a byte code
    chunk_size: int = 65536         # bytes scanned per pass
    read_block_size: int = 65536    # bytes read per block
    encoding: str = "utf-8"
    use_polling: bool = False
    poll_interval: float = 1.0

    def __post_init__(self):
        sep = self.separator
        if isinstance(sep, str):
            if len(sep) != 1:
                raise ValueError("separator should be exactly 1 character long")
            if ord(sep) > 0xFF:
                raise ValueError(f"separator {sep!r} does not fit in a single byte")
        elif isinstance(sep, int) and not isinstance(sep, bool):
            if not 0 <= sep <= 0xFF:
                raise ValueError(f"separator byte must be in 0..255, got {sep}")
        else:
            raise ValueError(f"separator must be a str or int, got {type(sep).__name__}")

        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.read_block_size <= 0:
            raise ValueError(f"read_block_size must be positive, got {self.read_block_size}")
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"unknown encoding: {self.encoding}") from None

    @property
    def separator_byte(self) -> int:
        if isinstance(self.separator, str):
            return ord(self.separator)
        return self.separator

    @classmethod
    def from_dict(cls, d: dict) -> "TailConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
        return cls(**{k: v for k, v in d.items() if k in known})


def load_yaml_config(path: str | None) -> dict:
    """Load the YAML config file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def _env_overrides() -> dict:
    env = os.environ
    kwargs: dict = {}
    if "TAIL_READ_OLD" in env:
        kwargs["read_old"] = _parse_bool(env["TAIL_READ_OLD"])
    if "TAIL_ASYNC" in env:
        kwargs["emit_async"] = _parse_bool(env["TAIL_ASYNC"])
    if "TAIL_SEPARATOR" in env:
        kwargs["separator"] = parse_separator(env["TAIL_SEPARATOR"])
    if "TAIL_CHUNK_SIZE" in env:
        kwargs["chunk_size"] = int(env["TAIL_CHUNK_SIZE"])
    if "TAIL_ENCODING" in env:
        kwargs["encoding"] = env["TAIL_ENCODING"]
    if "TAIL_POLLING" in env:
        kwargs["use_polling"] = _parse_bool(env["TAIL_POLLING"])
    if "TAIL_POLL_INTERVAL" in env:
        kwargs["poll_interval"] = float(env["TAIL_POLL_INTERVAL"])
    return kwargs


def load_config(cli_args=None, yaml_data: dict | None = None) -> TailConfig:
    """Build TailConfig from defaults <- YAML ``tail`` section <- env vars <- CLI args."""
    kwargs: dict = dict((yaml_data or {}).get("tail") or {})
    if "separator" in kwargs and isinstance(kwargs["separator"], str):
        kwargs["separator"] = parse_separator(kwargs["separator"])
    kwargs.update(_env_overrides())

    if cli_args is not None:
        if getattr(cli_args, "from_beginning", False):
            kwargs["read_old"] = True
        if getattr(cli_args, "emit_async", False):
            kwargs["emit_async"] = True
        if getattr(cli_args, "polling", False):
            kwargs["use_polling"] = True
        if getattr(cli_args, "separator", None) is not None:
            kwargs["separator"] = parse_separator(cli_args.separator)
        if getattr(cli_args, "chunk_size", None) is not None:
            kwargs["chunk_size"] = cli_args.chunk_size
        if getattr(cli_args, "encoding", None) is not None:
            kwargs["encoding"] = cli_args.encoding
        if getattr(cli_args, "poll_interval", None) is not None:
            kwargs["poll_interval"] = cli_args.poll_interval

    return TailConfig.from_dict(kwargs)
