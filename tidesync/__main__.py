import sys

from tidesync.runner import cli

sys.exit(cli())
