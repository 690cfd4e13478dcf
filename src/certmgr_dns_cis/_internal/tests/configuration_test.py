"""Tests for certmgr_dns_cis.configuration."""
import os
import shutil
import sys
import tempfile
import unittest

import pytest

from certmgr_dns_cis import constants
from certmgr_dns_cis import errors
from certmgr_dns_cis.configuration import HandlerConfig
from certmgr_dns_cis._internal.cis_test_common import CIS_CRN


class HandlerConfigTest(unittest.TestCase):
    """Tests for certmgr_dns_cis.configuration.HandlerConfig."""

    def setUp(self):
        self.tempdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tempdir)

    def _write(self, text):
        path = os.path.join(self.tempdir, 'handler.ini')
        with open(path, 'w') as f:
            f.write(text)
        return path

    def test_defaults(self):
        config = HandlerConfig()
        assert config.cis_crn is None
        assert config.cis_api_url == constants.CIS_API_URL
        assert config.certificate_manager_api_url == constants.CERTIFICATE_MANAGER_API_URL
        assert config.iam_token_url == constants.IAM_TOKEN_URL
        assert config.record_ttl == 120
        assert config.timeout == constants.DEFAULT_NETWORK_TIMEOUT
        assert config.verify_ssl is True

    def test_cis_base_url(self):
        config = HandlerConfig(cis_crn='crn:v1:a/b', cis_api_url='https://cis.example.test/')
        assert config.cis_base_url == 'https://cis.example.test/v1/crn%3Av1%3Aa%2Fb'

    def test_cis_base_url_without_crn(self):
        with pytest.raises(errors.ConfigurationError):
            HandlerConfig().cis_base_url  # pylint: disable=expression-not-assigned

    def test_from_params(self):
        config = HandlerConfig.from_params({
            'data': 'ignored',
            'cisCrn': CIS_CRN,
            'certificateManagerApiUrl': 'https://eu-de.certificate-manager.cloud.ibm.com/',
            'recordTtl': '60',
            'iamTokenUrl': '',
        })
        assert config.cis_crn == CIS_CRN
        assert config.certificate_manager_api_url == \
            'https://eu-de.certificate-manager.cloud.ibm.com'
        assert config.record_ttl == 60
        assert config.iam_token_url == constants.IAM_TOKEN_URL

    def test_from_params_invalid_record_ttl(self):
        with pytest.raises(errors.ConfigurationError) as exc_info:
            HandlerConfig.from_params({'recordTtl': 'abc'})
        assert 'record_ttl' in str(exc_info.value)

    def test_invalid_timeout(self):
        with pytest.raises(errors.ConfigurationError):
            HandlerConfig(timeout=None)

    def test_from_params_keyword_wins(self):
        config = HandlerConfig.from_params({'cisCrn': CIS_CRN}, cis_crn='crn:other', timeout=3)
        assert config.cis_crn == 'crn:other'
        assert config.timeout == 3

    def test_from_file(self):
        path = self._write('# CIS instance\n'
                           'cis_crn = {0}\n'
                           'record_ttl = 90\n'
                           'unknown = ignored\n'.format(CIS_CRN))
        config = HandlerConfig.from_file(path)
        assert config.cis_crn == CIS_CRN
        assert config.record_ttl == 90
        assert config.cis_api_url == constants.CIS_API_URL

    def test_from_file_missing(self):
        with pytest.raises(errors.ConfigurationError):
            HandlerConfig.from_file(os.path.join(self.tempdir, 'missing.ini'))

    def test_from_file_invalid(self):
        path = self._write('cis_crn = "a\ncis_crn = b\n[section\n')
        with pytest.raises(errors.ConfigurationError):
            HandlerConfig.from_file(path)

    def test_repr(self):
        assert CIS_CRN in repr(HandlerConfig(cis_crn=CIS_CRN))


if __name__ == "__main__":
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
