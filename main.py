"""
termprompt - command line entry point
"""

from termprompt.cli import app


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
