"""Allow ``python -m resolve_node``."""

from .cli_service import main

if __name__ == "__main__":
    main()
