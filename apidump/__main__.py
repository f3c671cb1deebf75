"""Allow ``python -m apidump``; the relay relies on it to re-enter the tool."""

import sys

from apidump.main import main

if __name__ == "__main__":
    sys.exit(main())
