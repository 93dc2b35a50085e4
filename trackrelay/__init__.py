"""
FedEx Track Relay.
Batch shipment tracking lookups over the FedEx web-tracking endpoint.
"""

__version__ = "1.0.0"
