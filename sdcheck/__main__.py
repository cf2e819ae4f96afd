"""Allow ``python -m sdcheck``."""
import sys

from .cli import main

sys.exit(main())
