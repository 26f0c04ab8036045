"""
Shared HTTP client.

Provides a pre-configured ``requests.Session`` with a default timeout and a
project User-Agent. Retries are disabled: failures surface to the caller
unchanged, and retry policy is left to whoever issues the calls. A custom
``Retry`` can still be mounted via ``create_session(retry=...)``.

Usage::

    from epidata_signals.services.http import session

    resp = session.get("https://api.delphi.cmu.edu/epidata/covidcast/", params=...)
    resp.raise_for_status()
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from epidata_signals import __version__
from epidata_signals.config import get_settings

#: No retries; connection errors and bad statuses reach the caller.
DEFAULT_RETRY = Retry(total=0, raise_on_status=False)

USER_AGENT = f"epidata-signals/{__version__}"


def create_session(
    retry: Retry | None = None,
    timeout: float | None = None,
) -> requests.Session:
    """
    Build a ``requests.Session`` with the adapter mounted.

    Args:
        retry: Retry strategy (defaults to ``DEFAULT_RETRY``, i.e. none).
        timeout: Default timeout applied to every request
            (defaults to ``Settings.request_timeout``).
    """
    if timeout is None:
        timeout = get_settings().request_timeout

    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = USER_AGENT

    # Wrap send to inject a default timeout so callers don't need to
    # remember to pass ``timeout=`` every time.
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = timeout
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Module-level session; import and use directly.
session: requests.Session = create_session()
