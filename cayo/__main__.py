"""
The entry point for running with `python -m cayo`.

"""
import sys

from cayo.cli import main

if __name__ == '__main__':
    sys.exit(main())
