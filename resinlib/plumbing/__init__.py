"""
Low-level APIs for environment variable management.

Each public operation in this module should:

- make a single change (or read), with no retries and no caching
- raise or propagate an exception on any failures, without translating it
- accept its clients as constructor arguments rather than finding its own

Operations that talk to the backend are coroutine methods decorated with `common.deferred`, so
callers get an `asyncio.Future` and may also pass a `callback`.  Pure helpers (such as
`envvars.is_system_variable`) are plain synchronous functions.
"""
