#!/usr/bin/env python
"""
Entry point for running the action locally.

Loads a .env file (INPUT_* variables, GITHUB_EVENT_PATH, provider keys) and
runs the action once against the event it describes.
"""

import sys
import asyncio
from pathlib import Path

# Add src directory to Python path
project_root = Path(__file__).parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

# Check for required dependencies
try:
    from dotenv import load_dotenv
    import httpx  # noqa: F401
except ImportError as e:
    print(f"""
❌ Error: Missing required dependencies

{e}

Please make sure you have installed the project:

    pip install -e .

Then try running again:
    python run.py
""")
    sys.exit(1)

# Load environment variables
load_dotenv()

# Configure logging before importing application modules
from conventional_pr_title.logging_config import configure_logging
configure_logging()

from conventional_pr_title.main import run


def main() -> int:
    """Run the action once."""
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())
