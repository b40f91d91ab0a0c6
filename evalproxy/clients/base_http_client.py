# clients/base_http_client.py
import requests
import re

from typing import Dict, Any, Optional
from urllib.parse import urljoin
from abc import ABC
from evalproxy.utils.log import app_logger
from evalproxy.core.exceptions.exceptions import (
    MalformedResponse,
    UpstreamTimeout,
    UpstreamUnavailable,
)

class BaseHTTPClient(ABC):
    """Base HTTP client with common functionalities like GET, default headers, and error handling"""
    
    USER_AGENT = "evalproxy/1.0"

    def __init__(self,
                 base_url: str,
                 api_key: Optional[str] = None, 
                 timeout: float = 30,
                 content_type: Optional[str] = 'application/json',
                 accept: Optional[str] = 'application/json',
                 session: Optional[requests.Session] = None,
                 ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.content_type = content_type
        self.accept = accept
        self.session = session or requests.Session()
        
        # setup default headers
        self._setup_default_headers()
    
    def _setup_default_headers(self):
        """setup default headers for the client"""
        self.session.headers.update({
            'User-Agent': self.USER_AGENT,
            'Accept': self.accept,
            'Content-Type': self.content_type,
        })
        
        # add authentication header if api_key is provided
        if self.api_key:
            self._setup_authentication()
            
    def _setup_authentication(self):
        """setup authentication with API key (can be overridden)"""
        pass
    
    def _build_url(self, endpoint: str) -> str:
        """build full URL"""
        return urljoin(f"{self.base_url}/", endpoint.lstrip('/'))

    @staticmethod
    def _sanitize(exc: Exception) -> str:
        # remove memory addresses like <HTTPConnection(...) at 0x...>
        return re.sub(r'0x[0-9a-fA-F]+', '<ptr>', str(exc))
    
    def _make_request(self, method: str, endpoint: str, 
                     params: Optional[Dict] = None,
                     headers: Optional[Dict] = None) -> Dict[str, Any]:
        """do a single HTTP request, translating transport failures into upstream errors"""
        url = self._build_url(endpoint)
        request_headers = headers or {}
        
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                headers=request_headers,
                timeout=self.timeout
            )

            if response.status_code >= 400:
                app_logger.debug("request.status", method=method, url=url, status_code=response.status_code)

            response.raise_for_status()

        except requests.exceptions.RequestException as e:
            sanitized = self._sanitize(e)
            exc_type = type(e).__name__
            app_logger.error("request.failed", method=method, url=url, exc_type=exc_type, error=sanitized)

            if isinstance(e, requests.exceptions.Timeout):
                raise UpstreamTimeout(endpoint, sanitized) from e
            status_code = e.response.status_code if getattr(e, 'response', None) is not None else None
            raise UpstreamUnavailable(endpoint, sanitized, status_code=status_code) from e

        try:
            return response.json()
        except ValueError:
            app_logger.debug("request.parse_failed", url=url, length=len(response.text))
            raise MalformedResponse(endpoint, 'body')
    
    def get(self, endpoint: str, params: Optional[Dict] = None, 
            headers: Optional[Dict] = None) -> Dict[str, Any]:
        """do GET request"""
        return self._make_request('GET', endpoint, params=params, headers=headers)
    
    def close(self):
        """close HTTP session"""
        self.session.close()
