"""IAM access tokens."""
import logging

from certmgr_dns_cis import constants
from certmgr_dns_cis import errors
from certmgr_dns_cis._internal.network import json_body
from certmgr_dns_cis._internal.network import ServiceClient

logger = logging.getLogger(__name__)

TOKEN_ERROR_MESSAGE = 'Error obtaining access token'


class TokenProvider:
    """Exchanges an IAM API key for a short-lived bearer access token.

    A new token is requested on every call; tokens are never cached.
    """

    def __init__(self, network: ServiceClient) -> None:
        self.network = network

    def obtain_access_token(self, api_key: str) -> str:
        """Obtain an access token from IAM.

        :param str api_key: IAM API key.
        :returns: The access token.
        :rtype: str
        :raises .TokenError: if IAM cannot be reached or refuses the key.
        """
        data = {
            'grant_type': constants.IAM_APIKEY_GRANT_TYPE,
            'apikey': api_key,
            'response_type': 'cloud_iam',
        }
        headers = {
            'Content-Type': 'application/x-www-form-urlencoded',
            'Accept': 'application/json',
        }

        try:
            response = self.network.post(self.network.config.iam_token_url,
                                         data=data, headers=headers, log_body=False)
        except errors.TransportError as e:
            logger.error("Couldn't obtain access token. Reason is: %s", e)
            raise errors.TokenError(TOKEN_ERROR_MESSAGE)

        body = json_body(response)
        if response.status_code == 200 and isinstance(body, dict) and body.get('access_token'):
            return body['access_token']

        logger.error("Couldn't obtain access token. Reason is: status: %d response headers are: "
                     "%s and body: %s", response.status_code, dict(response.headers),
                     response.text)
        raise errors.TokenError(TOKEN_ERROR_MESSAGE, response)
