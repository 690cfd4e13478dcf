"""Tests for certmgr_dns_cis._internal.cli."""
import io
import json
import os
import shutil
import sys
import tempfile
import unittest
from unittest import mock

import pytest

from certmgr_dns_cis import constants
from certmgr_dns_cis import errors
from certmgr_dns_cis._internal import cis_test_common

SUCCESS = {'statusCode': 200, 'headers': {'Content-Type': 'application/json'}, 'body': {}}


class ReadParamsTest(unittest.TestCase):
    """Tests for certmgr_dns_cis._internal.cli.read_params."""

    def setUp(self):
        self.tempdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tempdir)

    @classmethod
    def _call(cls, source, stdin=None):
        from certmgr_dns_cis._internal.cli import read_params
        return read_params(source, stdin or io.StringIO())

    def test_stdin(self):
        assert self._call('-', io.StringIO('{"data": "x"}')) == {'data': 'x'}

    def test_file(self):
        path = os.path.join(self.tempdir, 'params.json')
        with open(path, 'w') as f:
            json.dump({'data': 'y'}, f)
        assert self._call(path) == {'data': 'y'}

    def test_missing_file(self):
        with pytest.raises(errors.ConfigurationError):
            self._call(os.path.join(self.tempdir, 'missing.json'))

    def test_not_json(self):
        with pytest.raises(errors.ConfigurationError):
            self._call('-', io.StringIO('data=x'))

    def test_not_an_object(self):
        with pytest.raises(errors.ConfigurationError):
            self._call('-', io.StringIO('["data"]'))


class MainTest(unittest.TestCase):
    """Tests for certmgr_dns_cis._internal.cli.main."""

    def setUp(self):
        self.handle_patcher = mock.patch('certmgr_dns_cis.main.handle', return_value=SUCCESS)
        self.mock_handle = self.handle_patcher.start()
        self.logging_patcher = mock.patch('certmgr_dns_cis._internal.log.setup_logging')
        self.mock_setup_logging = self.logging_patcher.start()
        self.stdout = io.StringIO()

    def tearDown(self):
        self.handle_patcher.stop()
        self.logging_patcher.stop()

    def _call(self, args, params=None):
        from certmgr_dns_cis._internal.cli import main
        stdin = io.StringIO(json.dumps(params if params is not None else {'data': 'x'}))
        with mock.patch.dict(os.environ, {}, clear=True):
            return main(args, stdin=stdin, stdout=self.stdout)

    def test_success(self):
        assert self._call(['--cis-crn', cis_test_common.CIS_CRN, '--iam-api-key', 'key']) == 0

        params, config = self.mock_handle.call_args[0]
        assert params == {'data': 'x', 'iamApiKey': 'key'}
        assert config.cis_crn == cis_test_common.CIS_CRN
        assert config.record_ttl == constants.RECORD_TTL
        assert config.verify_ssl is True
        assert json.loads(self.stdout.getvalue()) == SUCCESS

    def test_failure_exit_status(self):
        self.mock_handle.return_value = {'statusCode': 403, 'headers': {},
                                         'body': {'message': 'Unauthorized'}}
        assert self._call([]) == 1
        assert json.loads(self.stdout.getvalue())['statusCode'] == 403

    def test_options(self):
        self._call(['--cis-api-url', 'https://cis.example.test',
                    '--certificate-manager-api-url', 'https://cm.example.test',
                    '--iam-token-url', 'https://iam.example.test/token',
                    '--record-ttl', '300', '--timeout', '5', '--no-verify-ssl'])

        config = self.mock_handle.call_args[0][1]
        assert config.cis_api_url == 'https://cis.example.test'
        assert config.certificate_manager_api_url == 'https://cm.example.test'
        assert config.iam_token_url == 'https://iam.example.test/token'
        assert config.record_ttl == 300
        assert config.timeout == 5
        assert config.verify_ssl is False

    def test_cis_crn_from_params(self):
        self._call([], {'data': 'x', 'cisCrn': cis_test_common.CIS_CRN})
        assert self.mock_handle.call_args[0][1].cis_crn == cis_test_common.CIS_CRN

    def test_environment(self):
        from certmgr_dns_cis._internal.cli import main
        env = {'CERTMGR_DNS_CIS_CIS_CRN': cis_test_common.CIS_CRN,
               'CERTMGR_DNS_CIS_RECORD_TTL': '60'}
        with mock.patch.dict(os.environ, env, clear=True):
            main([], stdin=io.StringIO('{}'), stdout=self.stdout)

        config = self.mock_handle.call_args[0][1]
        assert config.cis_crn == cis_test_common.CIS_CRN
        assert config.record_ttl == 60

    def test_config_file(self):
        tempdir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, tempdir)
        path = os.path.join(tempdir, 'handler.ini')
        with open(path, 'w') as f:
            f.write('cis_crn = {0}\nrecord_ttl = 90\niam_token_url = https://iam.example.test\n'
                    .format(cis_test_common.CIS_CRN))

        assert self._call(['-c', path, '--record-ttl', '30']) == 0

        config = self.mock_handle.call_args[0][1]
        assert config.cis_crn == cis_test_common.CIS_CRN
        assert config.record_ttl == 30
        assert config.iam_token_url == 'https://iam.example.test'

    def test_missing_config_file(self):
        assert self._call(['-c', '/nonexistent/handler.ini']) == 1
        self.mock_handle.assert_not_called()

    def test_verbosity(self):
        self._call(['-vv'])
        level = self.mock_setup_logging.call_args[0][0]
        assert level == constants.DEFAULT_LOGGING_LEVEL - 20

    def test_bad_params(self):
        from certmgr_dns_cis._internal.cli import main
        assert main([], stdin=io.StringIO('nope'), stdout=self.stdout) == 1
        self.mock_handle.assert_not_called()


if __name__ == "__main__":
    sys.exit(pytest.main(sys.argv[1:] + [__file__]))  # pragma: no cover
