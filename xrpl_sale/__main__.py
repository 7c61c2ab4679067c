"""Main entry point for the XRPL.Sale SDK command line."""

from xrpl_sale.cli import cli

if __name__ == "__main__":
    cli()
