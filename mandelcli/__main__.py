"""
Allow running the package directly: python -m mandelcli
"""
from .cli import main

main(prog_name="mandelcli")
