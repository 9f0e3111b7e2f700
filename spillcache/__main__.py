"""Main entry point when executing spillcache as a package.

This allows running the package using python -m spillcache.
"""

from spillcache.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
