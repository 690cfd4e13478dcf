"""Cloud Functions action entry point."""
import logging
from typing import Any
from typing import Dict
from typing import Mapping
from typing import Optional

from certmgr_dns_cis import constants
from certmgr_dns_cis import errors
from certmgr_dns_cis.configuration import HandlerConfig
from certmgr_dns_cis._internal import log
from certmgr_dns_cis._internal.handler import ChallengeHandler
from certmgr_dns_cis._internal.handler import error_response
from certmgr_dns_cis._internal.network import ServiceClient

logger = logging.getLogger(__name__)


def handle(params: Mapping[str, Any], config: HandlerConfig) -> Dict[str, Any]:
    """Handle one notification with a fresh HTTP session.

    :param dict params: Invocation parameters.
    :param .HandlerConfig config: Handler configuration.
    :returns: The action response.
    :rtype: dict
    """
    with ServiceClient(config) as network:
        return ChallengeHandler(network).handle(params)


def main(params: Mapping[str, Any], config: Optional[HandlerConfig] = None) -> Dict[str, Any]:
    """Run the action.

    :param dict params: Cloud Functions actions accept a single parameter,
        which must be a JSON object. Besides the notification parameters it
        may carry the configuration parameters read by
        `.HandlerConfig.from_params`.
    :param .HandlerConfig config: Configuration to use instead of the one
        built from `params`.
    :returns: The output of the action, which must be a JSON object.
    :rtype: dict
    """
    log.setup_logging(constants.ACTION_LOGGING_LEVEL, log.FILE_FMT)
    logger.info('Certificate Manager notification handler invoked.')
    if config is None:
        try:
            config = HandlerConfig.from_params(params)
        except errors.ConfigurationError as e:
            logger.error('Action failed. Reason: %s', e)
            return error_response(e)
    return handle(params, config)
