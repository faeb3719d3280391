"""
Stats fetcher - one HTTP GET per poll cycle
"""

import time
import asyncio
import logging
from typing import Optional

import aiohttp

from .errors import HttpStatusError, ReadError, TransportError

logger = logging.getLogger(__name__)


class StatsFetcher:
    """Retrieves the raw stats payload over a shared aiohttp session"""

    def __init__(self, session: aiohttp.ClientSession, user_agent: str = "StatProbe/1.0",
                 request_timeout: Optional[float] = None):
        self.session = session
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.last_status: Optional[int] = None
        self.last_response_time: float = 0.0

    async def fetch(self, url: str) -> bytes:
        """Fetch the payload at url

        Returns:
            bytes: The full response body, uninterpreted

        Raises:
            TransportError: request failed or no response arrived
            HttpStatusError: endpoint answered with a non-2xx status
            ReadError: the body could not be read completely
        """
        start_time = time.time()
        self.last_status = None
        headers = {'User-Agent': self.user_agent}
        kwargs = {}
        if self.request_timeout is not None:
            kwargs['timeout'] = aiohttp.ClientTimeout(total=self.request_timeout)

        try:
            async with self.session.get(url, headers=headers, **kwargs) as response:
                self.last_status = response.status
                if not 200 <= response.status < 300:
                    raise HttpStatusError(url, response.status, response.reason)

                try:
                    body = await response.read()
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    raise ReadError(url, f"error reading response body: {e!r}") from e

        except (HttpStatusError, ReadError):
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError(url, f"{type(e).__name__}: {e}") from e
        finally:
            self.last_response_time = time.time() - start_time

        logger.debug(f"Fetched {len(body)} bytes from {url} in {self.last_response_time:.3f}s "
                     f"(HTTP {self.last_status})")
        return body
