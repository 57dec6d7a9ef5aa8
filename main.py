"""
Main entry point for KastleWatch.

    python main.py controller
    python main.py worker
    python main.py crdgen > crds.yaml
"""
import sys

from kastlewatch.cli import main


if __name__ == "__main__":
    sys.exit(main())
