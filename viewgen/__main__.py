"""Entry point: python -m viewgen"""

from .cli import main

if __name__ == "__main__":
    main()
