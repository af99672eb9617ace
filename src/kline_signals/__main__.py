"""Allow `python -m kline_signals`."""

from .cli import main

if __name__ == "__main__":
    main()
