#!/usr/bin/env python3
"""
Telegram relay bot for an OpenAI Assistant.

Run from the project root:  python host/relay_bot.py
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from assistant_relay.bot import main

if __name__ == "__main__":
    main()
