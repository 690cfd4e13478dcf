"""Challenge handler constants."""
import logging

CIS_API_URL = 'https://api.cis.cloud.ibm.com'
"""Base URL of the Cloud Internet Services API."""

CERTIFICATE_MANAGER_API_URL = 'https://us-south.certificate-manager.cloud.ibm.com'
"""Certificate Manager API URL. Pick the one matching the instance region."""

IAM_TOKEN_URL = 'https://iam.cloud.ibm.com/identity/token'
"""IAM endpoint used to exchange an API key for an access token."""

IAM_APIKEY_GRANT_TYPE = 'urn:ibm:params:oauth:grant-type:apikey'

RECORD_TTL = 120
"""TTL (in seconds) of the challenge TXT record."""

DEFAULT_NETWORK_TIMEOUT = 45
"""Default timeout (in seconds) of every outbound request."""

ACME_CHALLENGE_PREFIX = '_acme-challenge'

DUPLICATE_RECORD_MESSAGE = 'The record already exists.'
"""Error message CIS returns when an identical record is already present."""

EVENT_VALIDATION_REQUIRED = 'cert_domain_validation_required'
EVENT_VALIDATION_COMPLETED = 'cert_domain_validation_completed'

NOTIFICATION_ALGORITHMS = ['RS256', 'RS384', 'RS512']
"""Algorithms accepted on Certificate Manager notifications."""

JSON_HEADERS = {'Content-Type': 'application/json'}

DEFAULT_ERROR_MESSAGE = 'Error processing your request'

ENV_PREFIX = 'CERTMGR_DNS_CIS_'
"""Prefix of the environment variables read by the command line runner."""

DEFAULT_LOGGING_LEVEL = logging.WARNING
"""Default logging level of the command line runner."""

QUIET_LOGGING_LEVEL = logging.ERROR
"""Logging level used with --quiet."""

ACTION_LOGGING_LEVEL = logging.INFO
"""Logging level used when running as a Cloud Functions action."""
