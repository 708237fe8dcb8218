"""Package identity reported to clients during the `initialize` handshake."""

from __future__ import annotations

from typing import Dict, Optional

#: Package name, also the default `serverInfo.name`.
NAME = "mcp-stdio-server"

#: Current release (MAJOR.MINOR.PATCH).
VERSION = "1.0.6"


def get_server_info(name: Optional[str] = None) -> Dict[str, str]:
    """Return the `serverInfo` block, optionally overriding the advertised name."""
    return {"name": name or NAME, "version": VERSION}
