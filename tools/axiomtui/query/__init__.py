"""
Query transport and result model for axiomtui.

This subpackage holds everything that talks to the remote service or
describes what it sends back.

Modules:
    - result: Immutable result types (matches, buckets, totals) and the
      Scalar value wrapper used for heterogeneous JSON values
    - client: HTTP QueryClient, its configuration and error types
"""
