import os
import sys

# --- Make the package importable without installing it ---
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "src")))

from scopus_fetcher.cli import main

if __name__ == "__main__":
    sys.exit(main())
