import logging
from urllib.parse import quote

import requests
import urllib3

from constants import DATA_SETS_PATH, REQUEST_TIMEOUT
from managers.exceptions import RemoteOperationError

# Disable InsecureRequestWarning if not verifying SSL certificates.
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger('vmdatasets.api')


class DataSetsApi:
    """
    A thin client for the vSphere Automation 'data-sets' REST resources.

    Every method issues exactly one HTTP request on the supplied session and
    raises RemoteOperationError for transport failures and non-2xx answers.
    """

    def __init__(self, session, base_url, timeout=REQUEST_TIMEOUT):
        """
        Args:
            session (requests.Session): An authenticated REST session
                (carries the vmware-api-session-id header).
            base_url (str): The vCenter base URL, e.g. 'https://vc.example.com:443'.
            timeout (int): Per-request timeout in seconds.
        """
        self.session = session
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def _data_sets_url(self, vm_ref, data_set=None):
        url = self.base_url + DATA_SETS_PATH.format(vm=quote(vm_ref, safe=''))
        if data_set is not None:
            url += f"/{quote(data_set, safe='')}"
        return url

    def _entries_url(self, vm_ref, data_set, key=None):
        url = f"{self._data_sets_url(vm_ref, data_set)}/entries"
        if key is not None:
            url += f"/{quote(key, safe='')}"
        return url

    @staticmethod
    def extract_error_message(response):
        """
        Extracts the human readable message from a vAPI error body, falling
        back to the HTTP status line.
        """
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            messages = [m.get('default_message') for m in body.get('messages', []) if isinstance(m, dict)]
            messages = [m for m in messages if m]
            if messages:
                return "; ".join(messages)
            if body.get('error_type'):
                return str(body['error_type'])
        text = (response.text or "").strip()
        return text or f"HTTP {response.status_code} {response.reason or ''}".strip()

    def _request(self, operation, method, url, **kwargs):
        logger.debug(f"{operation}: {method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise RemoteOperationError(operation, str(e)) from e
        if not 200 <= response.status_code < 300:
            raise RemoteOperationError(operation, self.extract_error_message(response),
                                       status_code=response.status_code)
        return response

    @staticmethod
    def _json_or_none(operation, response):
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteOperationError(operation, f"Invalid JSON response: {e}",
                                       status_code=response.status_code) from e

    # --- Data sets ---

    def create_data_set(self, operation, vm_ref, spec):
        """Creates a data set on the VM. Returns the new data set identifier."""
        response = self._request(operation, 'POST', self._data_sets_url(vm_ref), json=spec)
        return self._json_or_none(operation, response)

    def list_data_sets(self, operation, vm_ref):
        """Lists data set summaries ({data_set, name, description}) for the VM."""
        response = self._request(operation, 'GET', self._data_sets_url(vm_ref))
        return self._json_or_none(operation, response) or []

    def get_data_set(self, operation, vm_ref, data_set):
        """Returns the data set info document."""
        response = self._request(operation, 'GET', self._data_sets_url(vm_ref, data_set))
        return self._json_or_none(operation, response)

    def delete_data_set(self, operation, vm_ref, data_set, force=False):
        self._request(operation, 'DELETE', self._data_sets_url(vm_ref, data_set),
                      params={'force': 'true' if force else 'false'})

    # --- Entries ---

    def set_entry(self, operation, vm_ref, data_set, key, value):
        """Creates or replaces the entry 'key'. The body is the JSON encoded string value."""
        self._request(operation, 'PUT', self._entries_url(vm_ref, data_set, key), json=value)

    def list_entries(self, operation, vm_ref, data_set):
        """Returns the list of entry keys in the data set."""
        response = self._request(operation, 'GET', self._entries_url(vm_ref, data_set))
        return self._json_or_none(operation, response) or []

    def get_entry(self, operation, vm_ref, data_set, key):
        response = self._request(operation, 'GET', self._entries_url(vm_ref, data_set, key))
        return self._json_or_none(operation, response)

    def delete_entry(self, operation, vm_ref, data_set, key):
        self._request(operation, 'DELETE', self._entries_url(vm_ref, data_set, key))
