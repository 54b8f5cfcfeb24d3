import sys

from tokenvault.cli import main

sys.exit(main())
