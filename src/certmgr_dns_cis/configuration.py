"""Challenge handler configuration."""
import logging
from typing import Any
from typing import Mapping
from typing import Optional
from urllib.parse import quote

import configobj

from certmgr_dns_cis import constants
from certmgr_dns_cis import errors

logger = logging.getLogger(__name__)

# Invocation parameter name -> configuration attribute.
PARAM_NAMES = {
    'cisCrn': 'cis_crn',
    'cisApiUrl': 'cis_api_url',
    'certificateManagerApiUrl': 'certificate_manager_api_url',
    'iamTokenUrl': 'iam_token_url',
    'recordTtl': 'record_ttl',
}


def _to_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise errors.ConfigurationError('Invalid {0}: {1!r}'.format(name, value))


class HandlerConfig:
    """Endpoints and settings shared by all handler components.

    :ivar str cis_crn: CRN of the Cloud Internet Services instance that
        hosts the DNS zones.
    :ivar str cis_api_url: Base URL of the CIS API.
    :ivar str certificate_manager_api_url: Certificate Manager API URL
        for the region of the notifying instances.
    :ivar str iam_token_url: IAM token endpoint.
    :ivar int record_ttl: TTL of the challenge TXT record.
    :ivar int timeout: Timeout of every outbound request, in seconds.
    :ivar bool verify_ssl: Whether to verify TLS certificates.
    :ivar str user_agent: User-Agent header sent upstream.

    """

    def __init__(self, cis_crn: Optional[str] = None,
                 cis_api_url: str = constants.CIS_API_URL,
                 certificate_manager_api_url: str = constants.CERTIFICATE_MANAGER_API_URL,
                 iam_token_url: str = constants.IAM_TOKEN_URL,
                 record_ttl: int = constants.RECORD_TTL,
                 timeout: int = constants.DEFAULT_NETWORK_TIMEOUT,
                 verify_ssl: bool = True,
                 user_agent: str = 'certmgr-dns-cis') -> None:
        self.cis_crn = cis_crn
        self.cis_api_url = cis_api_url.rstrip('/')
        self.certificate_manager_api_url = certificate_manager_api_url.rstrip('/')
        self.iam_token_url = iam_token_url
        self.record_ttl = _to_int('record_ttl', record_ttl)
        self.timeout = _to_int('timeout', timeout)
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent

    def __repr__(self) -> str:
        return '<{0} cis_crn={1!r} cis_api_url={2!r} certificate_manager_api_url={3!r}>'.format(
            self.__class__.__name__, self.cis_crn, self.cis_api_url,
            self.certificate_manager_api_url)

    @property
    def cis_base_url(self) -> str:
        """Base URL of the zones API of the configured CIS instance.

        :raises .ConfigurationError: if no CIS CRN is configured.
        """
        if not self.cis_crn:
            raise errors.ConfigurationError('The CRN of the CIS instance is not configured')
        return '{0}/v1/{1}'.format(self.cis_api_url, quote(self.cis_crn, safe=''))

    @classmethod
    def from_params(cls, params: Mapping[str, Any], **kwargs: Any) -> 'HandlerConfig':
        """Build a configuration from Cloud Functions invocation parameters.

        Only the parameters listed in `PARAM_NAMES` are read; anything
        missing keeps its default. Explicit keyword arguments win.

        :raises .ConfigurationError: if a parameter has an invalid value.
        """
        values = {attr: params[name] for name, attr in PARAM_NAMES.items()
                  if params.get(name) not in (None, '')}
        values.update(kwargs)
        return cls(**values)

    @classmethod
    def from_file(cls, filename: str, **kwargs: Any) -> 'HandlerConfig':
        """Build a configuration from an INI file.

        :param str filename: Path of the configuration file.
        :raises .ConfigurationError: if the file cannot be parsed.
        """
        try:
            confobj = configobj.ConfigObj(filename, file_error=True)
        except (configobj.ConfigObjError, OSError) as e:
            logger.debug("Error parsing configuration '%s': %s", filename, e, exc_info=True)
            raise errors.ConfigurationError(
                "Error parsing configuration '{0}': {1}".format(filename, e))

        values = {attr: confobj[attr] for attr in PARAM_NAMES.values()
                  if confobj.get(attr)}
        values.update(kwargs)
        return cls(**values)
