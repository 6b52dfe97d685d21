"""Entry point for running as python -m phototaker."""

from phototaker.cli import main

if __name__ == "__main__":
    main()
