"""Certificate Manager notification dispatch."""
import logging
from typing import Any
from typing import Dict
from typing import Mapping
from typing import Optional

from certmgr_dns_cis import constants
from certmgr_dns_cis import errors
from certmgr_dns_cis._internal.cis import ChallengeRecordManager
from certmgr_dns_cis._internal.network import ServiceClient
from certmgr_dns_cis._internal.notifications import NotificationVerifier

logger = logging.getLogger(__name__)


def success_response() -> Dict[str, Any]:
    """Response returned when a notification has been handled."""
    return {
        'statusCode': 200,
        'headers': dict(constants.JSON_HEADERS),
        'body': {},
    }


def error_response(error: Exception) -> Dict[str, Any]:
    """Response describing `error`.

    Errors without their own status code are reported as 500.
    """
    status_code = getattr(error, 'status_code', None) or 500
    message = str(error) or constants.DEFAULT_ERROR_MESSAGE
    return {
        'statusCode': status_code,
        'headers': dict(constants.JSON_HEADERS),
        'body': {'message': message},
    }


class ChallengeHandler:
    """Handles one Certificate Manager notification.

    :param .ServiceClient network: HTTP client used for every upstream call.
    """

    def __init__(self, network: ServiceClient) -> None:
        self.verifier = NotificationVerifier(network)
        self.records = ChallengeRecordManager(network)

    def dispatch(self, notification: Mapping[str, Any], api_key: Optional[str]) -> None:
        """Act on a verified notification according to its event type.

        Event types other than domain validation are accepted and ignored.
        """
        event_type = notification.get('event_type')
        if event_type == constants.EVENT_VALIDATION_REQUIRED:
            self.records.set_challenge(notification, api_key)
        elif event_type == constants.EVENT_VALIDATION_COMPLETED:
            self.records.remove_challenge(notification, api_key)
        else:
            logger.debug('Ignoring notification with event type %s', event_type)

    def handle(self, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Verify and handle the notification carried by `params`.

        :param dict params: Invocation parameters: ``data``,
            ``allowedCertificateManagerCRNs`` and ``iamApiKey``.
        :returns: The action response, with status code, headers and body.
        :rtype: dict
        """
        try:
            notification = self.verifier.verify(params.get('data') or '',
                                                params.get('allowedCertificateManagerCRNs'))
            self.dispatch(notification, params.get('iamApiKey'))
        except errors.Error as e:
            logger.error('Action failed. Reason: %s', e)
            return error_response(e)
        except Exception as e:  # pylint: disable=broad-except
            logger.error('Action failed. Reason: %s', e, exc_info=True)
            return error_response(e)
        return success_response()
