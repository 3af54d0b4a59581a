import socket

import pytest


@pytest.fixture
def udp_peer():
    """Provide a bound UDP socket standing in for the simulator."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)

    yield sock

    sock.close()
