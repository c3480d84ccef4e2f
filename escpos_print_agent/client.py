"""
ESC/POS Print Agent Client
==========================

Python SDK for interacting with the print agent.

Usage:
    from escpos_print_agent.client import PrintClient

    client = PrintClient('http://localhost:9999')

    # List printers
    printers = client.list_printers()

    # Print a ticket
    client.print_ticket(['Table 4', '2x Coffee', 'Total: 7.00'])

    # Print barcodes
    client.print_barcode(['7790001000011', '7790001000028'], copies=2, text='Shelf A')
"""

import requests
from typing import Dict, Any, List, Union


class PrintClient:
    """Client for the ESC/POS Print Agent."""

    def __init__(self, base_url: str = 'http://localhost:9999', api_key: str = None,
                 timeout: int = 30):
        """
        Initialize client.

        Args:
            base_url: Base URL of the print agent
            api_key: API key for authentication
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        """Get request headers."""
        headers = {'Content-Type': 'application/json'}
        if self.api_key:
            headers['Authorization'] = f'Bearer {self.api_key}'
        return headers

    def _request(self, method: str, endpoint: str, data: Dict = None) -> Dict[str, Any]:
        """Make API request."""
        url = f'{self.base_url}{endpoint}'

        if method not in ('GET', 'POST'):
            raise ValueError(f'Unknown method: {method}')

        try:
            if method == 'GET':
                response = requests.get(url, headers=self._headers(), timeout=self.timeout)
            else:
                response = requests.post(url, json=data, headers=self._headers(), timeout=self.timeout)

            return response.json()

        except requests.exceptions.Timeout:
            return {'success': False, 'error': 'Request timeout'}
        except requests.exceptions.ConnectionError:
            return {'success': False, 'error': f'Cannot connect to {self.base_url}'}
        except ValueError as e:
            # Non-JSON response body
            return {'success': False, 'error': str(e)}
        except requests.exceptions.RequestException as e:
            return {'success': False, 'error': str(e)}

    # =========================================================================
    # Health
    # =========================================================================

    def ping(self) -> Dict[str, Any]:
        """Quick health check (includes the open printer, if any)."""
        return self._request('GET', '/ping')

    def health(self) -> Dict[str, Any]:
        """Service health with system info."""
        return self._request('GET', '/health')

    def is_online(self) -> bool:
        """Check if the agent is reachable."""
        return self.ping().get('status') == 'ok'

    # =========================================================================
    # Printers
    # =========================================================================

    def list_printers(self) -> List[str]:
        """Printers known to the host spooler."""
        result = self._request('GET', '/printers')
        return result.get('printers', [])

    # =========================================================================
    # Printing
    # =========================================================================

    def print_ticket(self, lines: List[str]) -> Dict[str, Any]:
        """Print lines of text followed by a cut."""
        return self._request('POST', '/print/ticket', {'lines': list(lines)})

    def print_barcode(self, codes: Union[str, List[str]], copies: int = 1,
                      text: str = '') -> Dict[str, Any]:
        """
        Print EAN-13 barcodes.

        Args:
            codes: One code or a list of codes
            copies: Number of copies of the whole batch
            text: Caption printed above each copy
        """
        data = {
            'codes': codes,
            'copies': copies,
            'text': text,
        }
        return self._request('POST', '/print/barcode', data)
