import sys

from snow_monitor.cli import main

sys.exit(main())
