"""User-Agent header sent by the transport drivers."""

import platform
from types import ModuleType
from typing import Optional

from resttest import __version__

AUTO = "auto"


def user_agent_for(driver: object, http_lib: ModuleType, client_name: Optional[str] = AUTO) -> str:
    """Describe ``driver`` and the HTTP library it sends requests with.

    Args:
        driver: The driver instance, its class name is used when client_name is "auto"
        http_lib: The imported HTTP library module, e.g. ``requests`` or ``httpx``
        client_name: Trailing product token. "auto" for the driver class name, None or "" for none.

    Returns:
        e.g. "resttest/0.1.0 python/3.12.1 httpx/0.28.1 HttpxDriver"
    """
    if client_name == AUTO:
        client_name = type(driver).__name__
    tokens = [
        f"resttest/{__version__}",
        f"python/{platform.python_version()}",
        f"{http_lib.__name__}/{getattr(http_lib, '__version__', 'unknown')}",
    ]
    if client_name:
        tokens.append(client_name)
    return " ".join(tokens)
