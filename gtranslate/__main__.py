import sys

from .translator_app import main

sys.exit(main())
