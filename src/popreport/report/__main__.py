import sys

from popreport.report.run import main

sys.exit(main())
