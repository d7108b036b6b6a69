"""
Entry point for the libregto tutor.

Run with:
    python main.py progress
    python main.py drill hand-strength
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from src.cli.tutor_cli import run

if __name__ == "__main__":
    run()
