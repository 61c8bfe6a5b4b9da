import sys

from oc2helm.cli.main import main

sys.exit(main())
