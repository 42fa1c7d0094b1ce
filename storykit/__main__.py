#!/usr/bin/env python3
"""Entry point for `python -m storykit`."""

import sys

from storykit.cli import main

sys.exit(main())
