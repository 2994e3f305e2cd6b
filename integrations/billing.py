import logging
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation

from .errors import ExternalServiceError
from .http import ServiceClient

logger = logging.getLogger(__name__)


class BillingService(ABC):

    @abstractmethod
    def validate_cost_code(self, cost_code):
        pass

    @abstractmethod
    def cost_for_module(self, module_name, cost_code):
        """Unit price of a module, or None when it cannot be costed"""


class HttpBillingService(ServiceClient, BillingService):
    service_name = 'billing service'
    url_setting = 'BILLING_URL'

    def validate_cost_code(self, cost_code):
        if not cost_code:
            return False
        try:
            response = self.request('GET', f'accounts/{cost_code}/verify', allow_404=True)
        except ExternalServiceError as e:
            logger.warning(f"Cost code {cost_code} could not be verified: {e}")
            return False
        return bool(response and response.get('verified'))

    def cost_for_module(self, module_name, cost_code):
        try:
            response = self.request(
                'GET',
                'price_for_module',
                allow_404=True,
                params={'module_name': module_name, 'cost_code': cost_code}
            )
        except ExternalServiceError as e:
            logger.warning(f"No price for module {module_name} on {cost_code}: {e}")
            return None
        if not response or response.get('price') is None:
            return None
        try:
            return Decimal(str(response['price']))
        except InvalidOperation:
            logger.warning(f"Unreadable price for module {module_name}: {response['price']}")
            return None
