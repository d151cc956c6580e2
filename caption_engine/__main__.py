"""Package entry point for ``python -m caption_engine``."""

from caption_engine.cli import main

if __name__ == "__main__":
    main()
