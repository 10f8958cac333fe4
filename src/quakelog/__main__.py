"""
quakelog CLI Entry Point

Allows running the package as a module: python -m quakelog
"""


def main():
    """Main entry point for the CLI."""
    from quakelog.cli import app

    app()


if __name__ == "__main__":
    main()
