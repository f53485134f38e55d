"""
Integration tests.

Integration tests exercise real components end to end:
- Probers against loopback TCP, UDP, HTTP and gRPC servers
- Probers spawning real child processes
- The metrics stack over the production psutil engine

They need no external services but touch the network stack and the
host, and run slower than unit tests.
"""
