"""Permite ``python -m diffwatch``."""

import sys

from .main import main

sys.exit(main())
