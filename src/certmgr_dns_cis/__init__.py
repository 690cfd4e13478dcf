"""
The `certmgr_dns_cis` package completes ``dns-01`` domain validation
challenges for certificates ordered through IBM Cloud Certificate Manager,
by creating, and subsequently removing, TXT records in IBM Cloud Internet
Services (CIS).

It is meant to be deployed as a Cloud Functions action that a Certificate
Manager instance notifies through a callback notification channel. Every
notification is a JWT signed by the sending instance; the action verifies it
with the public key of that instance before acting on it.

Events
------

==================================== ==========================================
``cert_domain_validation_required``  Add the TXT record
                                     ``<txt_record_name>.<domain>``.
``cert_domain_validation_completed`` Delete every ``_acme-challenge.<domain>``
                                     TXT record.
Any other event                      Ignored.
==================================== ==========================================

Wildcard domains (``*.example.com``) are handled in the zone of
``example.com``.

Parameters
----------

``data``                          The signed notification.
``allowedCertificateManagerCRNs`` Object mapping the CRN of every allowed
                                  Certificate Manager instance to ``true``.
``iamApiKey``                     IAM API key with ``Manager`` access to the
                                  CIS instance.
``cisCrn``                        CRN of the CIS instance (Required).
``certificateManagerApiUrl``      Certificate Manager API URL of the region
                                  of the instances.

.. code-block:: bash
   :caption: To handle a notification saved in ``params.json`` locally

   certmgr-dns-cis --cis-crn 'crn:v1:bluemix:public:internet-svcs:global:a/...' params.json

"""

# version number like 1.2.3a0, must have at least 2 parts, like 1.2
__version__ = '1.0.0.dev0'
