from __future__ import annotations

from tokensmith.main import cli

cli()
