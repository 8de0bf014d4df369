"""
Launch the pygame CHIP-8 frontend: python main.py ROM [options]
"""

import sys

from chipjax.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
