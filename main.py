import sys

from wire_ledger.cli import main

if __name__ == "__main__":
    sys.exit(main())
