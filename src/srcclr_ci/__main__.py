import sys

from srcclr_ci.cli.runner import main

if __name__ == "__main__":
    sys.exit(main())
