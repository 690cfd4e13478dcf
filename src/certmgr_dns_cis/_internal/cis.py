"""DNS challenge records in Cloud Internet Services."""
from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import NamedTuple
from typing import Optional

import requests

from certmgr_dns_cis import constants
from certmgr_dns_cis import errors
from certmgr_dns_cis._internal.iam import TokenProvider
from certmgr_dns_cis._internal.network import json_body
from certmgr_dns_cis._internal.network import ServiceClient

logger = logging.getLogger(__name__)


class Zone(NamedTuple):
    """A CIS DNS zone."""
    id: str
    status: Optional[str]


def strip_wildcard(domain: str) -> str:
    """Remove the wildcard label of a wildcard certificate domain."""
    if domain.startswith('*.'):
        return domain[2:]
    return domain


def _is_duplicate_record(response: requests.Response, body: Optional[Any]) -> bool:
    if response.status_code != 400 or not isinstance(body, dict):
        return False
    errs = body.get('errors') or []
    return bool(errs) and errs[0].get('message') == constants.DUPLICATE_RECORD_MESSAGE


class CISClient:
    """
    Encapsulates all communication with the CIS DNS API.

    :param .ServiceClient network: HTTP client.
    :param str access_token: IAM access token.
    :param str base_url: Base URL of the zones API; defaults to the
        configured `.HandlerConfig.cis_base_url`.
    """

    def __init__(self, network: ServiceClient, access_token: str,
                 base_url: Optional[str] = None) -> None:
        self.network = network
        self.base_url = base_url or network.config.cis_base_url
        self.headers = {
            'X-Auth-User-Token': access_token,
            'Content-Type': 'application/json',
        }

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        return self.network.request(method, self.base_url + path,
                                    headers=dict(self.headers), **kwargs)

    def get_zone(self, domain: str) -> Zone:
        """
        Find the active zone for a given domain.

        :param str domain: The domain for which to find the zone.
        :returns: The zone.
        :rtype: Zone
        :raises .ZoneNotFoundError: if no zone is found.
        """
        logger.info('Get CIS zone id for domain %s', domain)
        params = {'name': domain,
                  'status': 'active',
                  'page': 1,
                  'per_page': 1,
                  'order': 'status',
                  'direction': 'desc',
                  'match': 'all'}
        response = self._request('GET', '/zones', params=params)

        body = json_body(response)
        if response.status_code == 200 and isinstance(body, dict) and body.get('success'):
            if body.get('result'):
                zone = body['result'][0]
                logger.debug('Found zone %s (%s) for %s', zone['id'], zone.get('status'), domain)
                return Zone(zone['id'], zone.get('status'))
            logger.error("Couldn't find zone id for domain %s. Result is: %s",
                         domain, response.text)
        else:
            logger.error("Couldn't find zone id for domain %s. Reason is: %s, code is %d",
                         domain, response.text, response.status_code)
        raise errors.ZoneNotFoundError(
            "Couldn't find zone id for domain {0}".format(domain), response)

    def add_txt_record(self, zone: Zone, record_name: str, record_content: str,
                       record_ttl: int) -> None:
        """
        Add a TXT record using the supplied information.

        An identical record that already exists counts as success.

        :param Zone zone: The zone to add the record to.
        :param str record_name: The fully qualified record name.
        :param str record_content: The record content (the challenge validation).
        :param int record_ttl: The record TTL.
        :raises .RecordError: if CIS refuses the record.
        """
        data = {'type': 'TXT',
                'name': record_name,
                'content': record_content,
                'ttl': record_ttl}
        logger.debug('Attempting to add record to zone %s: %s', zone.id, data)
        response = self._request('POST', '/zones/{0}/dns_records'.format(zone.id), json=data)

        body = json_body(response)
        if response.status_code == 200 and isinstance(body, dict) and body.get('success'):
            logger.info('TXT record added to CIS')
        elif _is_duplicate_record(response, body):
            logger.info('TXT record already in CIS')
        else:
            logger.error("Couldn't add TXT record to CIS. Reason is: statusCode: %d body %s",
                         response.status_code, response.text)
            raise errors.RecordError(
                "Couldn't add TXT record {0} to CIS".format(record_name), response)

    def get_txt_record_ids(self, zone: Zone, record_name: str) -> List[str]:
        """
        Find the ids of every TXT record with the given name.

        :param Zone zone: The zone which contains the records.
        :param str record_name: The fully qualified record name.
        :rtype: list of str
        :raises .RecordError: if the records cannot be listed.
        """
        response = self._request('GET', '/zones/{0}/dns_records'.format(zone.id),
                                 params={'type': 'TXT', 'name': record_name})

        body = json_body(response)
        if response.status_code == 200 and isinstance(body, dict):
            logger.debug('Get all TXT records finished successfully. Body is: %s', response.text)
            return [record['id'] for record in body.get('result') or []]

        logger.error('Get all TXT records failed with status code: %d and body %s',
                     response.status_code, response.text)
        raise errors.RecordError(
            "Couldn't list TXT records {0}".format(record_name), response)

    def delete_record(self, zone: Zone, record_id: str) -> None:
        """
        Delete a record from the zone.

        :raises .RecordError: if CIS does not delete the record.
        """
        response = self._request('DELETE', '/zones/{0}/dns_records/{1}'.format(zone.id, record_id))
        if response.status_code == 200:
            logger.info('Delete TXT record %s finished successfully.', record_id)
            return

        logger.error('Delete TXT record %s failed with status code: %d and body %s',
                     record_id, response.status_code, response.text)
        raise errors.RecordError("Couldn't delete TXT record {0}".format(record_id), response)

    def delete_records(self, zone: Zone, record_ids: List[str]) -> None:
        """
        Delete records concurrently.

        Every deletion is attempted even if some fail. Once all of them have
        finished, the first failure is raised.

        :raises .Error: the first deletion failure, if any.
        """
        if not record_ids:
            logger.debug('No TXT records found; no cleanup needed.')
            return

        with ThreadPoolExecutor(max_workers=len(record_ids)) as executor:
            futures = [executor.submit(self.delete_record, zone, record_id)
                       for record_id in record_ids]

        failures = [e for e in (future.exception() for future in futures) if e is not None]
        if failures:
            logger.error('%d of %d TXT record deletions failed', len(failures), len(record_ids))
            raise failures[0]


class ChallengeRecordManager:
    """Sets up and tears down ``dns-01`` challenge records."""

    def __init__(self, network: ServiceClient) -> None:
        self.network = network
        self.token_provider = TokenProvider(network)

    def _get_cis_client(self, api_key: str) -> CISClient:
        # Raises on a missing CIS CRN before IAM is called.
        base_url = self.network.config.cis_base_url
        return CISClient(self.network, self.token_provider.obtain_access_token(api_key),
                         base_url)

    def set_challenge(self, notification: Mapping[str, Any], api_key: Optional[str]) -> None:
        """Add the challenge TXT record of a validation required notification.

        :param dict notification: Verified notification claims.
        :param str api_key: IAM API key with access to the CIS instance.
        :raises .AuthorizationError: if `api_key` is missing.
        """
        challenge: Dict[str, str] = notification.get('challenge') or {}
        logger.info("Set challenge: '%s' : %s", notification.get('domain'), challenge)
        if not api_key:
            logger.error("Couldn't set challenge. iamApiKey is missing")
            raise errors.AuthorizationError("Couldn't set challenge. iamApiKey is missing")

        client = self._get_cis_client(api_key)
        domain = strip_wildcard(notification['domain'])
        zone = client.get_zone(domain)

        record_name = '{0}.{1}'.format(challenge['txt_record_name'], domain)
        client.add_txt_record(zone, record_name, challenge['txt_record_val'],
                              self.network.config.record_ttl)

    def remove_challenge(self, notification: Mapping[str, Any], api_key: Optional[str]) -> None:
        """Delete every challenge TXT record of a validation completed notification.

        :param dict notification: Verified notification claims.
        :param str api_key: IAM API key with access to the CIS instance.
        :raises .AuthorizationError: if `api_key` is missing.
        """
        logger.info("Removing challenge TXT records for domain: '%s'", notification.get('domain'))
        if not api_key:
            logger.error("Couldn't remove challenge TXT record. iamApiKey is missing")
            raise errors.AuthorizationError(
                "Couldn't remove challenge TXT record. iamApiKey is missing")

        domain = strip_wildcard(notification['domain'])
        client = self._get_cis_client(api_key)
        zone = client.get_zone(domain)

        record_name = '{0}.{1}'.format(constants.ACME_CHALLENGE_PREFIX, domain)
        record_ids = client.get_txt_record_ids(zone, record_name)
        client.delete_records(zone, record_ids)
