#!/usr/bin/env python3
"""
Simple setup script for dropterrain using uv.
"""

import subprocess


def run_cmd(cmd: str, check: bool = True) -> int:
    """Run shell command and return exit code."""
    print(f"Running: {cmd}")
    return subprocess.run(cmd, shell=True, check=check).returncode


def main():
    """Set up dropterrain development environment."""

    # Check if uv is installed
    try:
        subprocess.run(["uv", "--version"], check=True, capture_output=True)
        print("✓ uv is already installed")
    except (subprocess.CalledProcessError, FileNotFoundError):
        print("Installing uv...")
        run_cmd("curl -LsSf https://astral.sh/uv/install.sh | sh")
        print("✓ uv installed")

    # Create virtual environment
    print("Creating virtual environment...")
    run_cmd("uv venv")

    # Install core dependencies
    print("Installing core dependencies...")
    run_cmd("uv pip install -e .")

    choice = input("\nInstall development tools (pytest)? [y/N]: ").strip().lower()
    if choice in ["y", "yes"]:
        print("Installing extras: dev")
        run_cmd("uv pip install -e '.[dev]'")

    print("\n🎉 Setup complete!")
    print("\nTo activate the environment:")
    print("  source .venv/bin/activate")
    print("\nTo get started:")
    print("  python -m dropterrain.generate --help")


if __name__ == "__main__":
    main()
