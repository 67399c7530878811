"""wrangler-cli: Command line shell for shader-wrangler."""

from __future__ import annotations

__version__ = "0.1.0"
