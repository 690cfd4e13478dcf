"""Common values and helpers for the challenge handler tests."""
from typing import Any
from typing import Dict
from typing import Optional
from urllib.parse import quote

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
import jwt
import requests_mock

from certmgr_dns_cis import constants
from certmgr_dns_cis.configuration import HandlerConfig
from certmgr_dns_cis._internal.network import ServiceClient

DOMAIN = 'example.com'
INSTANCE_CRN = 'crn:v1:bluemix:public:cloudcerts:us-south:a/1234:abc::'
CIS_CRN = 'crn:v1:bluemix:public:internet-svcs:global:a/1234:cis-instance::'
API_KEY = 'an-api-key'
ACCESS_TOKEN = 'an-access-token'
ZONE_ID = 'a-zone-id'
TXT_RECORD_VAL = 'tok123'

CIS_API_URL = 'https://cis.example.test'
CERTIFICATE_MANAGER_API_URL = 'https://cm.example.test'
IAM_TOKEN_URL = 'https://iam.example.test/identity/token'

KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)
OTHER_KEY = rsa.generate_private_key(public_exponent=65537, key_size=2048)

# requests_mock arguments that define the response body
BODY_ARGS = {'json', 'text', 'content', 'body', 'raw', 'exc', 'response_list'}


def public_pem(key: rsa.RSAPrivateKey = KEY) -> str:
    """PEM encoded public key of `key`."""
    return key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo).decode()


def sign(claims: Dict[str, Any], key: rsa.RSAPrivateKey = KEY) -> str:
    """Sign `claims` the way Certificate Manager signs its notifications."""
    return jwt.encode(claims, key, algorithm='RS256')


def notification(event_type: str = constants.EVENT_VALIDATION_REQUIRED,
                 domain: str = DOMAIN, instance_crn: str = INSTANCE_CRN) -> Dict[str, Any]:
    """Claims of a notification."""
    claims: Dict[str, Any] = {
        'instance_crn': instance_crn,
        'event_type': event_type,
        'domain': domain,
    }
    if event_type == constants.EVENT_VALIDATION_REQUIRED:
        claims['challenge'] = {
            'txt_record_name': constants.ACME_CHALLENGE_PREFIX,
            'txt_record_val': TXT_RECORD_VAL,
        }
    return claims


def params(claims: Optional[Dict[str, Any]] = None, key: rsa.RSAPrivateKey = KEY,
           **overrides: Any) -> Dict[str, Any]:
    """Invocation parameters carrying a signed notification."""
    result: Dict[str, Any] = {
        'data': sign(claims if claims is not None else notification(), key),
        'allowedCertificateManagerCRNs': {INSTANCE_CRN: True},
        'iamApiKey': API_KEY,
    }
    result.update(overrides)
    return result


def config(**kwargs: Any) -> HandlerConfig:
    """Configuration pointing at the test endpoints."""
    values: Dict[str, Any] = {
        'cis_crn': CIS_CRN,
        'cis_api_url': CIS_API_URL,
        'certificate_manager_api_url': CERTIFICATE_MANAGER_API_URL,
        'iam_token_url': IAM_TOKEN_URL,
    }
    values.update(kwargs)
    return HandlerConfig(**values)


def mocked_network(handler_config: Optional[HandlerConfig] = None):
    """A `.ServiceClient` whose requests are served by a `requests_mock.Adapter`."""
    network = ServiceClient(handler_config or config())
    adapter = requests_mock.Adapter(case_sensitive=True)
    network.session.mount('https://', adapter)
    return network, adapter


def public_key_url(instance_crn: str = INSTANCE_CRN,
                   handler_config: Optional[HandlerConfig] = None) -> str:
    """URL of the notification public key of an instance."""
    return '{0}/api/v1/instances/{1}/notifications/publicKey'.format(
        (handler_config or config()).certificate_manager_api_url, quote(instance_crn, safe=''))


def zones_url(handler_config: Optional[HandlerConfig] = None) -> str:
    """URL of the zone listing."""
    return (handler_config or config()).cis_base_url + '/zones'


def records_url(zone_id: str = ZONE_ID, handler_config: Optional[HandlerConfig] = None) -> str:
    """URL of the DNS records of a zone."""
    return '{0}/zones/{1}/dns_records'.format((handler_config or config()).cis_base_url, zone_id)


def register_token(adapter: requests_mock.Adapter, **kwargs: Any) -> None:
    """Serve IAM token requests."""
    if not BODY_ARGS.intersection(kwargs):
        kwargs['json'] = {'access_token': ACCESS_TOKEN}
    adapter.register_uri('POST', IAM_TOKEN_URL, **kwargs)


def register_public_key(adapter: requests_mock.Adapter, key: rsa.RSAPrivateKey = KEY,
                        **kwargs: Any) -> None:
    """Serve the notification public key."""
    if not BODY_ARGS.intersection(kwargs):
        kwargs['json'] = {'publicKey': public_pem(key)}
    adapter.register_uri('GET', public_key_url(), **kwargs)


def register_zone(adapter: requests_mock.Adapter, **kwargs: Any) -> None:
    """Serve the zone listing with a single active zone."""
    if not BODY_ARGS.intersection(kwargs):
        kwargs['json'] = {'success': True,
                          'result': [{'id': ZONE_ID, 'status': 'active'}]}
    adapter.register_uri('GET', zones_url(), **kwargs)
