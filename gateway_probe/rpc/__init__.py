"""Gateway protocol package.

Module split:
    - `envelope`: JSON-RPC request/response/error shapes and codec.
    - `transport`: `requests`-backed HTTP transport.
    - `session`: session-token negotiation.
    - `client`: stateful gateway client (handshake, tool listing, tool calls).
"""
