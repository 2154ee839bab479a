"""
MIDDLEWARE PACKAGE
==================

  body_limit       - BodySizeLimitMiddleware: 413 for bodies over the 10 MB JSON limit.
  rate_limit       - RateLimitMiddleware: sliding-window request limit per client IP on /api/.
  security_headers - SecurityHeadersMiddleware: standard hardening headers on every response.
"""
