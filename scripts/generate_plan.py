"""Print a weekly plan for a JSON profile file. See fitplan.cli for options."""
import sys

from fitplan.cli import main

if __name__ == "__main__":
    sys.exit(main())
