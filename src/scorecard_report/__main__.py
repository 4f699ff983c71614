import sys

from scorecard_report.server import main

sys.exit(main())
