"""Allow ``python -m kvcollections``."""

import sys

from .cli import main

sys.exit(main())
