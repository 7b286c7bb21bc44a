import sys

from pycarburanti.cli import main

sys.exit(main())
