"""
DevEnvKit - reproducible course development environments.

Sets up a machine for a Nix-flake based project:
- Installs Zsh, Nix and direnv (system package manager first, Nix as fallback)
- Enables Nix flakes
- Hooks direnv into Zsh and Bash
- Creates the project directory with flake.nix and .envrc
"""

__version__ = "0.1.0"
