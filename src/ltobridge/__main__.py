"""Entry point for running the client as module: python -m ltobridge"""

import sys

# Load .env file before importing anything else
from dotenv import load_dotenv
load_dotenv()

from ltobridge.cli import main

if __name__ == "__main__":
    sys.exit(main())
