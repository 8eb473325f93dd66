import sys

from cart_bundler.cli import main

if __name__ == "__main__":
    sys.exit(main())
