import sys

from airdrop_merkle.cli import main

sys.exit(main())
