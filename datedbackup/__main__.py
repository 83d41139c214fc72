"""Allow running as ``python -m datedbackup``."""

import sys

from .datedbackup import main

sys.exit(main())
