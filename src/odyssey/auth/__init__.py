"""Authentication and authorization.

Learn: the request path through this package is linear:

1. resolver.resolve_token — pick the token out of the request
   (Authorization: Bearer header first, then the odyssey-token cookie)
2. tokens.TokenCodec.validate — check signature and expiry, get the subject
3. principal.resolve_principal — load the User the subject names
4. guard.authorize — decide whether that user may act on a resource

Tokens are stateless signed JWTs. Logging out only clears the cookie;
a token copied elsewhere stays valid until it expires.
"""
