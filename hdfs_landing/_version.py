"""Version information for hdfs-landing."""

__version__ = "1.0.0"
