"""Build, validate and deploy a native addon library into its host application."""

__version__ = "0.1.0"
