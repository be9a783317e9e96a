# asa_cli/__main__.py
import sys

from asa_cli.cli import main

sys.exit(main())
