"""
Run with: python -m transientview [DIRECTORY] [--debug] [--log-file PATH]
"""
import sys

from transientview.main import main

if __name__ == "__main__":
    sys.exit(main())
