import sys

from cloudinfra.cli import main

sys.exit(main())
