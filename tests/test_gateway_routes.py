import unittest
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from lan_network.errors import DiscoveryError, ErrorKind
from lan_network.main import app
from lan_network.models.assignments import NetworkAssignment
from lan_network.services.gateway_resolver import GatewayResolver


ETH = NetworkAssignment(iname="eth0", address="192.168.1.20", netmask="255.255.255.0",
                        mac="a4:83:e7:01:02:03", internal=False, cidr="192.168.1.20/24")
LOOPBACK = NetworkAssignment(iname="lo", address="127.0.0.1", netmask="255.0.0.0",
                             mac="00:00:00:00:00:00", internal=True, cidr="127.0.0.1/8")


def offline_resolver(candidates):
    return GatewayResolver(
        enumerate_assignments=lambda: list(candidates),
        probe=AsyncMock(side_effect=DiscoveryError(ErrorKind.NO_ROUTE, "No route to host")),
        discover=AsyncMock(return_value="192.168.1.1"),
    )


class TestGatewayRoutes(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    @patch("lan_network.routes.gateway.gateway_resolver", new_callable=lambda: offline_resolver([LOOPBACK, ETH]))
    def test_resolve(self, _):
        response = self.client.get("/api/gateway/")

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["iname"], "eth0")
        self.assertEqual(data["gateway"], "192.168.1.1")
        self.assertEqual(data["family"], "IPv4")

    @patch("lan_network.routes.gateway.gateway_resolver", new_callable=lambda: offline_resolver([ETH]))
    def test_probe_not_found(self, _):
        response = self.client.get("/api/gateway/probe")

        self.assertEqual(response.status_code, 404)
        self.assertIn("detail", response.json())

    @patch("lan_network.routes.gateway.gateway_resolver", new_callable=lambda: offline_resolver([ETH]))
    def test_dhcp(self, _):
        response = self.client.get("/api/gateway/dhcp")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["gateway"], "192.168.1.1")

    @patch("lan_network.routes.gateway.gateway_resolver", new_callable=lambda: offline_resolver([]))
    def test_fallback_without_interfaces(self, _):
        response = self.client.get("/api/gateway/fallback")

        self.assertEqual(response.status_code, 404)

    @patch("lan_network.routes.gateway.gateway_resolver", new_callable=lambda: offline_resolver([ETH, LOOPBACK]))
    def test_list_interfaces(self, _):
        response = self.client.get("/api/interfaces/")

        self.assertEqual(response.status_code, 200)
        interfaces = response.json()["interfaces"]
        self.assertEqual([i["assignment"]["iname"] for i in interfaces], ["eth0", "lo"])
        self.assertEqual([i["subnet_priority"] for i in interfaces], [5, 1])
        self.assertEqual([i["classified_internal"] for i in interfaces], [False, True])


if __name__ == '__main__':
    unittest.main()
