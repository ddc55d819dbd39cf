import sys

from lcs.main import main

sys.exit(main())
