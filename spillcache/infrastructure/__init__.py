"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the cache to the outside world (file system, console, configuration
sources) by implementing the interfaces defined in the domain layer.
"""
