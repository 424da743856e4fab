"""Allow ``python -m klirr``."""
import sys

from klirr.cli import main

sys.exit(main())
