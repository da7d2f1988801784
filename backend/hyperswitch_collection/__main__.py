"""Allow `python -m hyperswitch_collection`."""
import sys

from .main import main

sys.exit(main())
