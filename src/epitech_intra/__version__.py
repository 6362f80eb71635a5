"""Version information for the Epitech intranet client.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "0.4.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 0.4.0 - asyncio transport, explicit pagination loop, typed failures
# 0.3.0 - Course/promo catalogs, student search
# 0.2.0 - Retry budget, paginated student listing
# 0.1.0 - Autologin handshake, profile/netsoul/notes/binome fetchers
