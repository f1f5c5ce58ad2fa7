import sys

from .host.bootstrap import main

sys.exit(main())
