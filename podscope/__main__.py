import sys

from podscope.main import main

sys.exit(main())
