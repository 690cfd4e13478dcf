"""HTTP plumbing shared by the upstream service clients."""
import logging
from types import TracebackType
from typing import Any
from typing import Optional
from typing import Type

import requests

from certmgr_dns_cis import errors
from certmgr_dns_cis.configuration import HandlerConfig

logger = logging.getLogger(__name__)


class ServiceClient:
    """Wrapper around requests that applies the handler defaults.

    Adds the user agent, timeout and TLS verification settings from the
    configuration, logs requests and responses, and turns network failures
    into `.TransportError`.

    :param .HandlerConfig config: Handler configuration.
    """

    def __init__(self, config: HandlerConfig) -> None:
        self.config = config
        self.session = requests.Session()

    def __enter__(self) -> 'ServiceClient':
        return self

    def __exit__(self, exc_type: Optional[Type[BaseException]],
                 exc_value: Optional[BaseException],
                 traceback: Optional[TracebackType]) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def request(self, method: str, url: str, log_body: bool = True,
                **kwargs: Any) -> requests.Response:
        """Send HTTP request.

        For allowed parameters please see `requests.request`.

        :param bool log_body: Whether to log the response body. Disable it
            for responses that carry credentials.

        :raises .TransportError: in case of any network problem

        :returns: HTTP Response
        :rtype: `requests.Response`

        """
        logger.debug('Sending %s request to %s.', method, url)
        kwargs.setdefault('verify', self.config.verify_ssl)
        kwargs.setdefault('timeout', self.config.timeout)
        kwargs.setdefault('headers', {})
        kwargs['headers'].setdefault('User-Agent', self.config.user_agent)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.debug('%s request to %s failed: %s', method, url, e, exc_info=True)
            raise errors.TransportError('Requesting {0}: {1}'.format(url, e))

        response.encoding = "utf-8"
        logger.debug('Received response:\nHTTP %d\n%s', response.status_code,
                     response.text if log_body else '<redacted>')
        return response

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        """Send GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> requests.Response:
        """Send POST request."""
        return self.request('POST', url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> requests.Response:
        """Send DELETE request."""
        return self.request('DELETE', url, **kwargs)


def json_body(response: requests.Response) -> Optional[Any]:
    """Decoded JSON body of `response`, or None if it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return None
