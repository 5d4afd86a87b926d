import sys

from . import cli

sys.exit(cli.main())

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
