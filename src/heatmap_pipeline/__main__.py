"""Allow ``python -m heatmap_pipeline``."""

import sys

from .cli import main

sys.exit(main())
