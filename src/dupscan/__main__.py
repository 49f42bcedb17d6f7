"""Allow ``python -m dupscan``."""

from __future__ import annotations

import sys

from dupscan.cli import main

sys.exit(main())
