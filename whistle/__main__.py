import sys

from whistle.cli.main import main

sys.exit(main())
