"""Ad performance aggregator entrypoint."""

from __future__ import annotations

import sys

from ad_aggregator.cli import main

if __name__ == "__main__":
    sys.exit(main())
