"""Entry point for 'python -m schoolbase' command."""

from schoolbase.cli import main

if __name__ == "__main__":
    main()
