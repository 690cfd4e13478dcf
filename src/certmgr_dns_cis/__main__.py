"""Run the challenge handler from the command line."""
import sys

from certmgr_dns_cis._internal import cli

if __name__ == '__main__':
    sys.exit(cli.main())
