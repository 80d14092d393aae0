import sys

from trackpad_relay.cli import main

sys.exit(main())
