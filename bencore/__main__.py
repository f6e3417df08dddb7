"""Allow ``python -m bencore``."""

from __future__ import annotations

import sys

from bencore.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
