#!/usr/bin/env python3
"""crawlcost - Entry point"""

from crawlcost.cli import main


if __name__ == "__main__":
    main()
