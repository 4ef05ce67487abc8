import sys

from etch_broker.cli import main

sys.exit(main())
