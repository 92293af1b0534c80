"""Base layer: errors, logging, timeouts, HTTP construction, engines and
streaming primitives shared by the endpoint modules."""
