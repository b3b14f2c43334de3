import sys

from mailcraft.cli import main

sys.exit(main())
