"""
Entry point for running DevEnvKit CLI as a module.

Usage: python -m devenvkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
