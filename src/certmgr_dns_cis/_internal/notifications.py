"""Certificate Manager notification verification.

Notifications are JWTs signed by the Certificate Manager instance that sent
them. The token is first decoded without verification, only to learn which
instance it claims to come from. That claim selects the public key to fetch
and is checked against the allowed instances; nothing else in the unverified
payload is trusted.
"""
import logging
from typing import Any
from typing import Dict
from typing import Mapping
from typing import Optional
from urllib.parse import quote

import jwt

from certmgr_dns_cis import constants
from certmgr_dns_cis import errors
from certmgr_dns_cis._internal.network import json_body
from certmgr_dns_cis._internal.network import ServiceClient

logger = logging.getLogger(__name__)


def decode_unverified(data: str) -> Dict[str, Any]:
    """Decode the notification claims without checking the signature.

    :param str data: Signed notification (JWT).
    :raises .VerificationError: if `data` is not a decodable JWT.
    """
    try:
        return jwt.decode(data, options={'verify_signature': False})
    except jwt.PyJWTError as e:
        logger.error("Couldn't decode notification: %s", e)
        raise errors.VerificationError('Malformed notification: {0}'.format(e))


def check_allowed(instance_crn: Any, allowed_crns: Any) -> None:
    """Ensure `instance_crn` is allowed to notify this handler.

    Both arguments come from untrusted input, so values of the wrong type
    are rejected like unknown instances.

    :raises .AuthorizationError: unless `instance_crn` is a string that maps
        to a truthy value in `allowed_crns`.
    """
    if (not isinstance(instance_crn, str) or not isinstance(allowed_crns, Mapping)
            or not instance_crn or not allowed_crns.get(instance_crn)):
        logger.error('Certificate Manager instance %s is not allowed to invoke this action',
                     instance_crn)
        raise errors.AuthorizationError('Unauthorized')


class NotificationVerifier:
    """Authenticates notifications sent by Certificate Manager instances."""

    def __init__(self, network: ServiceClient) -> None:
        self.network = network

    def verify(self, data: str, allowed_crns: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Decode, authorize and verify a notification.

        :param str data: Signed notification (JWT).
        :param dict allowed_crns: Instance CRNs allowed to send notifications.
        :returns: The verified notification claims.
        :rtype: dict
        :raises .AuthorizationError: if the sending instance is not allowed.
        :raises .PublicKeyError: if the instance public key cannot be fetched.
        :raises .VerificationError: if the signature does not verify.
        """
        instance_crn = decode_unverified(data).get('instance_crn')
        check_allowed(instance_crn, allowed_crns)

        public_key = self.get_public_key(instance_crn)
        try:
            claims = jwt.decode(data, public_key,
                                algorithms=constants.NOTIFICATION_ALGORITHMS,
                                options={'verify_aud': False})
        except (jwt.PyJWTError, ValueError) as e:
            logger.error('Notification from instance %s failed verification: %s',
                         instance_crn, e)
            raise errors.VerificationError('Invalid notification signature: {0}'.format(e))

        logger.info('Notification message body: %s', claims)
        return claims

    def get_public_key(self, instance_crn: str) -> str:
        """Get the PEM public key that signs the notifications of an instance.

        :param str instance_crn: CRN of the Certificate Manager instance.
        :rtype: str
        :raises .PublicKeyError: if the key cannot be fetched.
        """
        url = '{0}/api/v1/instances/{1}/notifications/publicKey'.format(
            self.network.config.certificate_manager_api_url, quote(instance_crn, safe=''))
        response = self.network.get(url, params={'keyFormat': 'pem'},
                                    headers={'Cache-Control': 'no-cache'})

        body = json_body(response)
        if response.status_code == 200 and isinstance(body, dict) and body.get('publicKey'):
            return body['publicKey']

        logger.error("Couldn't get the public key for instance %s. Reason is: %s",
                     instance_crn, response.text)
        raise errors.PublicKeyError(
            "Couldn't get the public key for instance {0}".format(instance_crn), response)
