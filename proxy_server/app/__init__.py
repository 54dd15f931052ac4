"""
Flutterwave Transfer Proxy
==========================

Authenticated forwarding proxy that relays transfer requests to the
Flutterwave API from a host with a static, allow-listed IP address.

Packages:
    - config: environment-driven settings
    - models: JSON bodies produced by the proxy
    - proxy:  request handling, CORS and the outbound Flutterwave call
    - main:   application factory and server entry point
"""
