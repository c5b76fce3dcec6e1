"""Run the appshelf CLI with ``python -m appshelf``."""

from __future__ import annotations

import sys

from appshelf.cli import main

sys.exit(main())
