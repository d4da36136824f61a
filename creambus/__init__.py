"""In-process message bus with fixed-size 32-byte messages and group-based routing.

The bus itself is in ``creambus.bus``; messages, buffers, drivers, configuration
and errors live in their own submodules.
"""

__version__ = "0.1.0"