import sys

from autoreg.cli import main

sys.exit(main())
