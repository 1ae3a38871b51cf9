"""
Bridges to other result libraries.

Submodules import their library at import time and are not loaded by
``import resultkit``:

- ``resultkit.interop.kungfu``: ``kungfu`` Result / LazyCoroResult (extra ``kungfu``)
"""
