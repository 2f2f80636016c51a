"""`python -m paramplot` エントリポイント。"""

import sys

from .api.runner import main

if __name__ == "__main__":
    sys.exit(main())
