import sys

from psstat.cli import main

sys.exit(main())
