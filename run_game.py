import sys
import os

from dotenv import load_dotenv

# Ensure src layout is on path when running directly from repo root.
ROOT = os.path.dirname(os.path.abspath(__file__))
SRC = os.path.join(ROOT, "src")
# Values already set in the environment win over the .env file.
load_dotenv(os.path.join(ROOT, ".env"))
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from quoridor_rules.cli import main

if __name__ == "__main__":
    main()
