"""Per-browser-session settings (e.g. the selected calendar view)."""

from typing import Any, Dict, Optional, Union

from flask import session


def setting(key: Union[str, Dict[str, Any], None] = None, default: Any = None) -> Optional[Any]:
    """Get or set values stored in the Flask session.

    Examples:
        setting("dest_url")                    # value or None
        setting("dest_url", "/backend")        # value or "/backend"
        setting({"dest_url": "/backend"})      # stores the pair, returns None

    Raises:
        ValueError: when ``key`` is empty
    """
    if not key:
        raise ValueError("The key argument cannot be empty.")

    if isinstance(key, dict):
        for name, value in key.items():
            session[name] = value
        return None

    return session.get(key, default)
