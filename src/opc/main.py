"""Main entry point for the `opc` content manager."""
from opc.cli import cli


def main():
    cli(prog_name='opc')

if __name__ == "__main__":
    main()
