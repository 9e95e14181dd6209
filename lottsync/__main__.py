"""Allow ``python -m lottsync``."""

from __future__ import annotations

from lottsync.cli import main

raise SystemExit(main())
