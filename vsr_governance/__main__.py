import sys

from vsr_governance.cli import main

sys.exit(main())
