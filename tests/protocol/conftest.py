import pytest

from sampquery.protocol import SAMPQueryProtocol

from . import server_endpoint


@pytest.fixture
def protocol() -> SAMPQueryProtocol:
    return SAMPQueryProtocol(server_endpoint)
