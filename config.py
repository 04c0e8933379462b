"""
Compiler configuration
Environment-aware defaults for pagination, diagnostics and logging
based on APP_ENV
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv

from jsonquery.spec import DEFAULT_PAGE, DEFAULT_PER_PAGE

logger = logging.getLogger(__name__)

# Environment modes
EnvironmentMode = Literal["development", "test", "production"]


def load_app_environment(mode: Optional[str] = None) -> str:
    """
    Load environment variables from the appropriate .env file.

    Priority:
    1. Explicit 'mode' argument
    2. APP_ENV environment variable
    3. Default to 'development'

    Loads .env.{mode} if it exists, falling back to .env
    """
    if not mode:
        mode = os.getenv('APP_ENV', 'development')

    base_path = Path(__file__).parent
    env_file = base_path / f'.env.{mode}'
    if not env_file.exists():
        env_file = base_path / '.env'

    if env_file.exists():
        logger.debug("Loading config from %s", env_file)
        # override=False lets variables from the host take precedence over .env values
        load_dotenv(env_file, override=False)

    return mode


def get_environment_mode() -> EnvironmentMode:
    """Get current environment mode from APP_ENV variable"""
    mode = os.getenv('APP_ENV', 'development').lower()
    if mode not in ('development', 'test', 'production'):
        mode = 'development'
    return mode  # type: ignore


def _positive_int(name: str, default: int) -> int:
    """Read a positive integer env var; anything else falls back to default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < 1:
        logger.warning("Ignoring %s=%r: must be >= 1", name, raw)
        return default
    return value


def _flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class QuerySettings:
    """
    Defaults applied when compiling query specs.

    Environment Variables:
    - JSONQUERY_DEFAULT_PAGE: Page used when the request has none (default: 1)
    - JSONQUERY_DEFAULT_PER_PAGE: Page size used when the request has none (default: 20)
    - JSONQUERY_DIAGNOSTICS: Collect dropped-entry diagnostics (default: on in development only)
    - JSONQUERY_LOG_LEVEL: Logging level for configure_logging (default: INFO)
    """
    default_page: int = DEFAULT_PAGE
    default_per_page: int = DEFAULT_PER_PAGE
    collect_diagnostics: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_environment(cls, mode: Optional[EnvironmentMode] = None) -> 'QuerySettings':
        """
        Load settings from environment variables

        Args:
            mode: Override environment mode (default: reads from APP_ENV)
        """
        mode = load_app_environment(mode)

        return cls(
            default_page=_positive_int('JSONQUERY_DEFAULT_PAGE', DEFAULT_PAGE),
            default_per_page=_positive_int('JSONQUERY_DEFAULT_PER_PAGE', DEFAULT_PER_PAGE),
            collect_diagnostics=_flag('JSONQUERY_DIAGNOSTICS', default=(mode == 'development')),
            log_level=os.getenv('JSONQUERY_LOG_LEVEL', 'INFO').upper(),
        )

    @classmethod
    def defaults(cls) -> 'QuerySettings':
        """Built-in defaults, ignoring the environment"""
        return cls()


def configure_logging(settings: Optional[QuerySettings] = None):
    """Configure root logging for applications embedding the compiler"""
    settings = settings or QuerySettings.from_environment()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
