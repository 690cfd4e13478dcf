"""Command line runner.

Runs the action locally: reads the invocation parameters as JSON from a file
(or stdin), handles the notification and prints the action response.
"""
import argparse
import json
import logging
import sys
from typing import Any
from typing import Dict
from typing import IO
from typing import List
from typing import Optional

import configargparse

from certmgr_dns_cis import __version__
from certmgr_dns_cis import constants
from certmgr_dns_cis import errors
from certmgr_dns_cis import main as action
from certmgr_dns_cis.configuration import HandlerConfig
from certmgr_dns_cis._internal import log

logger = logging.getLogger(__name__)

# Options that map to HandlerConfig attributes of the same name.
CONFIG_OPTIONS = ('cis_crn', 'cis_api_url', 'certificate_manager_api_url', 'iam_token_url',
                  'record_ttl')


def prepare_parser() -> configargparse.ArgParser:
    """Build the command line parser.

    Every option may also be given through a ``CERTMGR_DNS_CIS_`` prefixed
    environment variable. Options left unset fall back to the ``-c`` INI file,
    then to the built-in defaults.
    """
    parser = configargparse.ArgParser(
        prog='certmgr-dns-cis',
        description='Handle a Certificate Manager notification by setting up or removing '
                    'the dns-01 challenge TXT record in Cloud Internet Services.',
        auto_env_var_prefix=constants.ENV_PREFIX)

    parser.add_argument('params', nargs='?', default='-',
                        help='JSON file with the invocation parameters, "-" for stdin '
                             '(default: %(default)s)')
    parser.add_argument('-c', '--config', default=None,
                        help='INI file with the handler configuration')
    parser.add_argument('--iam-api-key', default=None,
                        help='IAM API key; overrides "iamApiKey" of the parameters')
    parser.add_argument('--cis-crn', default=None,
                        help='CRN of the Cloud Internet Services instance')
    parser.add_argument('--cis-api-url', default=None,
                        help='Cloud Internet Services API URL (default: {0})'.format(
                            constants.CIS_API_URL))
    parser.add_argument('--certificate-manager-api-url', default=None,
                        help='Certificate Manager API URL (default: {0})'.format(
                            constants.CERTIFICATE_MANAGER_API_URL))
    parser.add_argument('--iam-token-url', default=None,
                        help='IAM token endpoint (default: {0})'.format(constants.IAM_TOKEN_URL))
    parser.add_argument('--record-ttl', type=int, default=None,
                        help='TTL of the challenge record (default: {0})'.format(
                            constants.RECORD_TTL))
    parser.add_argument('--timeout', type=int, default=constants.DEFAULT_NETWORK_TIMEOUT,
                        help='Timeout of every request in seconds (default: %(default)s)')
    parser.add_argument('--no-verify-ssl', action='store_true', default=False,
                        help='Disable verification of the TLS certificates of the services')
    parser.add_argument('-v', '--verbose', dest='verbose_count', action='count', default=0,
                        help='This flag can be used multiple times to incrementally increase '
                             'the verbosity of output, e.g. -vvv.')
    parser.add_argument('-q', '--quiet', action='store_true', default=False,
                        help='Silence all output except errors.')
    parser.add_argument('--log-file', default=None,
                        help='Also write a debug log to this file')
    parser.add_argument('--version', action='version',
                        version='%(prog)s {0}'.format(__version__))
    return parser


def read_params(source: str, stdin: IO[str]) -> Dict[str, Any]:
    """Load the invocation parameters.

    :raises .ConfigurationError: if they are not a JSON object.
    """
    try:
        if source == '-':
            params = json.load(stdin)
        else:
            with open(source) as f:
                params = json.load(f)
    except (OSError, ValueError) as e:
        raise errors.ConfigurationError("Couldn't read parameters from {0}: {1}".format(
            source, e))
    if not isinstance(params, dict):
        raise errors.ConfigurationError('Parameters must be a JSON object')
    return params


def build_config(args: argparse.Namespace, params: Dict[str, Any]) -> HandlerConfig:
    """Handler configuration for the parsed command line.

    Explicit options (or their environment variables) win over ``cisCrn``
    in the parameters, which wins over the ``-c`` INI file.

    :raises .ConfigurationError: if the INI file cannot be read.
    """
    overrides: Dict[str, Any] = {
        name: getattr(args, name) for name in CONFIG_OPTIONS if getattr(args, name) is not None}
    if 'cis_crn' not in overrides and params.get('cisCrn'):
        overrides['cis_crn'] = params['cisCrn']
    overrides['timeout'] = args.timeout
    overrides['verify_ssl'] = not args.no_verify_ssl

    if args.config:
        return HandlerConfig.from_file(args.config, **overrides)
    return HandlerConfig(**overrides)


def main(cli_args: Optional[List[str]] = None, stdin: Optional[IO[str]] = None,
         stdout: Optional[IO[str]] = None) -> int:
    """Command line entry point.

    :returns: 0 if the notification was handled, 1 otherwise.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    args = prepare_parser().parse_args(cli_args)
    log.setup_logging(log.get_level(args.verbose_count, args.quiet), log_file=args.log_file)

    try:
        params = read_params(args.params, stdin)
    except errors.ConfigurationError as e:
        logger.error('%s', e)
        return 1
    if args.iam_api_key:
        params['iamApiKey'] = args.iam_api_key

    try:
        config = build_config(args, params)
    except errors.ConfigurationError as e:
        logger.error('%s', e)
        return 1
    logger.debug('Using configuration %r', config)

    response = action.handle(params, config)
    json.dump(response, stdout, indent=2)
    stdout.write('\n')
    return 0 if response['statusCode'] == 200 else 1
