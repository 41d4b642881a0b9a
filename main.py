import sys

from tts_workbench.cli import main

if __name__ == "__main__":
    sys.exit(main())
