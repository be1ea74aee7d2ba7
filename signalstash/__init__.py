"""HTTP service that ingests protobuf sensor readings into RedisTimeSeries."""

__version__ = "0.1.0"
__all__ = ["__version__"]