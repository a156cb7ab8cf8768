"""Allow ``python -m promlinter``."""

import sys

from .cli import main

sys.exit(main())
