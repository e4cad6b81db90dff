"""Allow ``python -m terminal_ping``."""

import sys

from .cli import main

sys.exit(main())
