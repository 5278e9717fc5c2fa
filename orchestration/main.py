"""
Tabletop Bot — launcher.

Starts the Discord client from bot/client.py with the settings in .env.
The same entry point is installed as the `tabletop-bot` console script.

    python orchestration/main.py
"""

import os
import sys

if __name__ == "__main__":
    # Run as a script: make the project root importable.
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    from bot.client import run

    run()
