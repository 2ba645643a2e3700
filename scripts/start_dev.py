#!/usr/bin/env python3
"""
Development startup script.

Runs pre-flight checks, then starts the storefront with auto-reload.
The restaurant backend is expected to be running separately.
"""

import os
import sys
import shutil
import subprocess
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent


def check_dependencies():
    """Check if required dependencies are installed."""
    try:
        import fastapi
        import uvicorn
        import httpx
        import jinja2
        print("✓ All core dependencies installed")
        return True
    except ImportError as e:
        print(f"✗ Missing dependency: {e.name}")
        print("\nRun: pip install -e .")
        return False


def check_env():
    """Check if .env file exists."""
    env_file = PROJECT_ROOT / "config" / ".env"
    env_example = PROJECT_ROOT / "config" / ".env.example"

    if env_file.exists():
        print("✓ Configuration file found")
        return True
    elif env_example.exists():
        print("! Configuration file not found, copying from example...")
        shutil.copy(env_example, env_file)
        print("✓ Created config/.env from example")
        print("  Please edit config/.env with your settings")
        return True
    else:
        print("✗ No configuration file found")
        return False


def check_backend():
    """Warn when the restaurant backend does not answer."""
    import httpx

    sys.path.insert(0, str(PROJECT_ROOT))
    from storefront.core.config import get_settings

    url = f"{get_settings().backend_api_url}/health"
    try:
        httpx.get(url, timeout=3.0)
        print(f"✓ Backend reachable at {url}")
    except httpx.HTTPError:
        print(f"! Backend not reachable at {url} - menu and checkout will fail until it is up")


def start_storefront():
    """Start the storefront in development mode."""
    port = os.environ.get("PORT", "5173")
    print(f"\n🍜 Starting Storefront on http://localhost:{port} ...")
    process = subprocess.Popen(
        [
            sys.executable, "-m", "uvicorn",
            "storefront.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", port,
        ],
        cwd=PROJECT_ROOT,
        env={**os.environ, "DEBUG": "true"},
    )

    print("\n" + "=" * 60)
    print(f"📍 Site:     http://localhost:{port}")
    print(f"📍 Cart API: http://localhost:{port}/docs")
    print("\nPress Ctrl+C to stop")
    print("=" * 60)

    try:
        process.wait()
    except KeyboardInterrupt:
        print("\n\nShutting down...")
        process.terminate()
        process.wait()
        print("Storefront stopped.")


def main():
    print("=" * 60)
    print("Restaurant Storefront - Development Server")
    print("=" * 60)

    # Pre-flight checks
    print("\nRunning pre-flight checks...")

    if not check_dependencies():
        sys.exit(1)

    if not check_env():
        sys.exit(1)

    check_backend()

    print("\n✓ All checks passed!")

    start_storefront()


if __name__ == "__main__":
    main()
