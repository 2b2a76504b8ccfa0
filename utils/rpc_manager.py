"""
RPC connection manager for the scanned network
"""
import aiohttp
from web3 import AsyncWeb3, AsyncHTTPProvider

from config.settings import get_rpc_url
from utils.logger import get_logger

logger = get_logger(__name__)


class RPCManager:
    """
    Owns the Web3 connection and the aiohttp session behind it
    """

    def __init__(self, url: str | None = None, timeout: float = 30.0):
        self._url = url
        self._timeout = timeout
        self._web3: AsyncWeb3 | None = None
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                use_dns_cache=True,
                ttl_dns_cache=600,
                limit=50,
                enable_cleanup_closed=True,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self._timeout, connect=10)
            )
        return self._session

    async def get_web3(self) -> AsyncWeb3:
        """Get the Web3 instance, creating it on first use"""
        if self._web3 is None:
            url = self._url or get_rpc_url()
            provider = AsyncHTTPProvider(url, request_kwargs={"timeout": self._timeout})
            # Share one session across every request of the pass
            await provider.cache_async_session(await self._get_session())
            self._web3 = AsyncWeb3(provider)
            logger.debug(f"Connected Web3 provider for {url}")
        return self._web3

    async def close(self):
        """Close the Web3 provider and the HTTP session"""
        if self._web3 is not None and hasattr(self._web3.provider, "disconnect"):
            await self._web3.provider.disconnect()
        self._web3 = None

        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None


# Global RPC manager instance
rpc_manager = RPCManager()
