"""Allow ``python -m speckit_status``."""

from speckit_status.cli import main

if __name__ == "__main__":
    main()
