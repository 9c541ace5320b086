#!/usr/bin/env python3
"""Allow running as ``python -m namechain``."""

import sys

from namechain.cli import main

sys.exit(main())
