"""Odyssey — travel journal sharing backend.

Users keep journals of their trips, publish them or keep them private,
and comment on and react to each other's public entries. The package
owns authentication (stateless signed tokens) and the authorization
rules that decide who may read or change what.
"""

__version__ = "0.1.0"
