from typing import Type, TypeVar

from sampquery.protocol import Endpoint, QueryType, SAMPQueryProtocol

T = TypeVar("T")

server_endpoint = Endpoint.parse("193.70.94.12", 7777)


def exchange(
    protocol: SAMPQueryProtocol,
    query_type: QueryType,
    response: bytes,
    result_cls: Type[T],
) -> T:
    """Sends a query through the protocol and feeds it the given response."""
    protocol.send_query(query_type)
    result = protocol.receive_datagram(response)
    assert isinstance(result, result_cls)
    return result
