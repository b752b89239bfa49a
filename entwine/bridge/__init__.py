"""Bridge layer between Entwine and the outside world.

Modules
-------
fetch
    ``Fetcher`` protocol and the httpx-backed ``HttpFetcher``.  Every
    transport failure surfaces as ``NetworkError``.
archive
    Zip extraction into a staging directory, merged into place file by
    file.  A corrupt archive never touches live files.
catalog
    Client for the online mod catalog.
"""
