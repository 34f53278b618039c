"""Parse options for mathmark, held in a ContextVar.

The lexer and every nested parser read the active ParseConfig through
get_parse_config(), so options never have to be threaded through
constructors. Each thread and asyncio task sees its own value (PEP 567).

Usage:
    with parse_config_context(ParseConfig(links_enabled=True)):
        doc = parse(source)

    # Override single fields of whatever is active
    with parse_config_context(strict=True):
        doc = parse(source)

"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, fields, replace
from typing import Any

from mathmark.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Options for one parse.

    Attributes:
        max_nesting_depth: Deepest allowed chain of nested constructs
            (emphasis spans, list items, environments, paragraphs).
            Deeper content is flattened and reported.
        strict: Raise the first diagnostic as an exception instead of
            recovering from it
        links_enabled: Lex ``[text](url)`` into link tokens

    """

    max_nesting_depth: int = 100
    strict: bool = False
    links_enabled: bool = False

    def __post_init__(self) -> None:
        if self.max_nesting_depth < 1:
            raise ValueError(
                f"max_nesting_depth must be positive, got {self.max_nesting_depth}"
            )

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "ParseConfig":
        """Build a config from a mapping such as a loaded settings file.

        Keys that name no ParseConfig field are skipped (and logged at
        DEBUG); missing keys keep their defaults.

        Example:
            >>> ParseConfig.from_dict({"strict": True, "theme": "dark"}).strict
            True

        Raises:
            ValueError: ``max_nesting_depth`` is not positive
        """
        known = {f.name for f in fields(cls)}
        ignored = sorted(set(options) - known)
        if ignored:
            logger.debug("Ignoring unknown parse options: %s", ", ".join(ignored))
        return cls(**{key: value for key, value in options.items() if key in known})


_DEFAULT_CONFIG = ParseConfig()

_active_config: ContextVar[ParseConfig] = ContextVar(
    "mathmark_parse_config", default=_DEFAULT_CONFIG
)


def get_parse_config() -> ParseConfig:
    """Return the config active in the current context."""
    return _active_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Make ``config`` active for the rest of the current context."""
    _active_config.set(config)


def reset_parse_config() -> None:
    _active_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(
    config: ParseConfig | None = None, **overrides: Any
) -> Iterator[ParseConfig]:
    """Activate a config for the duration of a ``with`` block.

    Args:
        config: Config to activate; the currently active one when None
        **overrides: Fields replaced on top of ``config``

    Yields:
        The config in effect inside the block

    The previous config is restored on exit, also when the block raises.

    Example:
        >>> with parse_config_context(max_nesting_depth=10) as config:
        ...     config.max_nesting_depth
        10

    """
    effective = config if config is not None else get_parse_config()
    if overrides:
        effective = replace(effective, **overrides)
    token = _active_config.set(effective)
    try:
        yield effective
    finally:
        _active_config.reset(token)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
