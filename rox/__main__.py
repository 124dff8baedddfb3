import sys

from rox.main import main


sys.exit(main())
