import sys

from sb_harness.main import main

sys.exit(main())
