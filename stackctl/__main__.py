"""Allow running stackctl with ``python -m stackctl``"""

from .cli.main import main

if __name__ == "__main__":
    main()
