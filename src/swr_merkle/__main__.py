import sys

from swr_merkle.cli.main import main

sys.exit(main())
