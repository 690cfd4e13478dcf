"""
This module contains the internal code of the challenge handler. The
public entry points are `certmgr_dns_cis.main.main` and the
``certmgr-dns-cis`` command.
"""
