"""Module entrypoint for `python -m protoc_gen_events`.

Delegates to the generator CLI implementation.
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
