import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from resttest import DEFAULT_ENV_CONFIG_FILE_PATH
from resttest.builder import EMPTY_BUILDER, RequestBuilder, parse_url

ENV_VAR = "RESTTEST_ENV"

logger = logging.getLogger(__name__)


@dataclass
class Environment:
    name: str
    base_url: str
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class EnvConfig:
    environments: Dict[str, Environment] = field(default_factory=dict)
    default_environment: Optional[str] = None


def load_env_config(path: Union[str, os.PathLike] = DEFAULT_ENV_CONFIG_FILE_PATH) -> EnvConfig:
    """Load config from JSON file. Returns empty EnvConfig if file doesn't exist.

    Expected format::

        {
            "environments": {
                "local": {"base_url": "http://localhost:8080/api", "headers": {"Accept": "application/json"}}
            },
            "default_environment": "local"
        }
    """
    expanded = Path(path).expanduser()
    if not expanded.exists():
        logger.debug(f"No environment config at {expanded}")
        return EnvConfig()

    data = json.loads(expanded.read_text())

    environments = {}
    for name, env_data in data.get("environments", {}).items():
        if "base_url" not in env_data:
            raise ValueError(f"Environment '{name}' in {expanded} is missing 'base_url'")
        environments[name] = Environment(
            name=name,
            base_url=parse_url(env_data["base_url"]),
            headers={str(k): str(v) for k, v in env_data.get("headers", {}).items()},
        )

    return EnvConfig(
        environments=environments,
        default_environment=data.get("default_environment"),
    )


def resolve_environment(config: EnvConfig, env_name: Optional[str] = None) -> Environment:
    """Resolve which environment to use.

    Resolution order:
    1. Explicit env_name (--env flag)
    2. RESTTEST_ENV environment variable
    3. default_environment from config
    """
    name = env_name or os.environ.get(ENV_VAR) or config.default_environment
    if not name:
        raise ValueError("No environment given and no default_environment configured")
    if name not in config.environments:
        raise ValueError(f"Unknown environment: {name}")
    return config.environments[name]


def builder_for(env: Environment, builder: RequestBuilder = EMPTY_BUILDER) -> RequestBuilder:
    """Apply the environment's base url and default headers to ``builder``."""
    return builder.with_url(env.base_url).add_headers(*env.headers.items())
