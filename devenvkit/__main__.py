"""
Entry point for running DevEnvKit as a module.

Usage: python -m devenvkit [command] [options]
"""

from devenvkit.cli.parser import main

if __name__ == "__main__":
    main()
