"""
UTILITIES PACKAGE
=================

Helpers used by the services (no HTTP routing, no chat logic):

  time_info - get_timestamp(): ISO-8601 UTC timestamp for JSON responses.
  retry     - post_with_retry(): async POST that retries 429/5xx with exponential backoff.
"""
