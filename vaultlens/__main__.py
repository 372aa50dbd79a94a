"""Allow ``python -m vaultlens``."""
from .cli import main

if __name__ == "__main__":
    main()
