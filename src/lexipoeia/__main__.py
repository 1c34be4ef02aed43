import sys

from lexipoeia.cli import main

sys.exit(main())
