"""Protocol definitions for the collaborators injected into the resolver.

These protocols use Python's typing.Protocol system with the
@runtime_checkable decorator to enable both static type checking and runtime
isinstance() checks.
"""

from .resolution_protocols import SdkDefaultsProtocol, SigningConfigRegistryProtocol


__all__ = [
    "SdkDefaultsProtocol",
    "SigningConfigRegistryProtocol",
]
