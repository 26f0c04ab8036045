"""
Shared transport utilities.

- http.py - pre-configured ``requests.Session`` (timeout, User-Agent, no retries)
"""
