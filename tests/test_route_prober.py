import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from lan_network.config import settings
from lan_network.errors import DiscoveryError, ErrorKind
from lan_network.services.route_prober import probe_default_route


class TestProbeDefaultRoute(unittest.IsolatedAsyncioTestCase):
    def _transport(self, sockname):
        transport = MagicMock()
        transport.get_extra_info.return_value = sockname
        return transport

    async def test_returns_local_address(self):
        transport = self._transport(("192.168.1.20", 54321))
        loop = asyncio.get_running_loop()
        endpoint = AsyncMock(return_value=(transport, MagicMock()))
        with patch.object(loop, "create_datagram_endpoint", endpoint):
            address = await probe_default_route()

        self.assertEqual(address, "192.168.1.20")
        self.assertEqual(endpoint.call_args.kwargs["remote_addr"], (settings.probe_host, settings.probe_port))
        transport.get_extra_info.assert_called_once_with("sockname")
        transport.close.assert_called_once_with()

    async def test_unspecified_address_means_no_route(self):
        transport = self._transport(("0.0.0.0", 0))
        loop = asyncio.get_running_loop()
        with patch.object(loop, "create_datagram_endpoint", AsyncMock(return_value=(transport, MagicMock()))):
            with self.assertRaises(DiscoveryError) as ctx:
                await probe_default_route()

        self.assertEqual(ctx.exception.kind, ErrorKind.NO_ROUTE)
        transport.close.assert_called_once_with()

    async def test_os_error_propagates(self):
        loop = asyncio.get_running_loop()
        error = OSError(101, "Network is unreachable")
        with patch.object(loop, "create_datagram_endpoint", AsyncMock(side_effect=error)):
            with self.assertRaises(OSError):
                await probe_default_route()


if __name__ == '__main__':
    unittest.main()
