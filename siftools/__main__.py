import sys

from siftools.cli import main

sys.exit(main())
