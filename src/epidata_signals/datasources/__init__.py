"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, parameter encoding, transport
    └── {feature}.py      # Query functions (one per endpoint family)

Query functions build a parameter list and hand it to the client::

    from epidata_signals.datasources.epidata.client import fetch_epidata

    def call_something(signal, geo) -> EpiDataResponse[SomeRow]:
        params = [("signal", str(signal)), ("geo", str(geo))]
        return fetch_epidata("/covidcast/something", params, EpiDataResponse[SomeRow])

Row and envelope models live in ``epidata_signals.schemas``.
"""
