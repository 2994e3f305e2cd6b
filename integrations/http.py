"""
Shared HTTP plumbing for the remote service clients
"""
import logging

import requests
from django.conf import settings

from .errors import ExternalServiceError

logger = logging.getLogger(__name__)


class ServiceClient:
    """
    Thin wrapper around a requests session bound to one service base URL.
    Transport failures and non-2xx answers become ExternalServiceError.
    """
    service_name = 'service'
    url_setting = None

    def __init__(self, base_url=None, timeout=None, session=None):
        config = settings.WORK_ORDERS_SETTINGS
        self.base_url = (base_url or config[self.url_setting]).rstrip('/') + '/'
        self.timeout = timeout or config.get('REQUEST_TIMEOUT_SECONDS', 30)
        self.session = session or requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        })

    def url(self, path):
        return self.base_url + path.lstrip('/')

    def request(self, method, path, allow_404=False, **kwargs):
        url = self.url(path)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{self.service_name} {method} {url} failed: {e}")
            raise ExternalServiceError(self.service_name, str(e)) from e

        if allow_404 and response.status_code == 404:
            return None
        if response.status_code >= 400:
            logger.warning(f"{self.service_name} {method} {url} answered {response.status_code}")
            raise ExternalServiceError(
                self.service_name,
                f"{method} {path} answered {response.status_code}: {response.text[:200]}",
                status_code=response.status_code
            )
        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    def http_get(self, path, **kwargs):
        return self.request('GET', path, **kwargs)

    def http_post(self, path, payload=None, **kwargs):
        return self.request('POST', path, json=payload, **kwargs)

    def http_patch(self, path, payload=None, **kwargs):
        return self.request('PATCH', path, json=payload, **kwargs)

    def http_delete(self, path, **kwargs):
        return self.request('DELETE', path, **kwargs)
