"""pclconvert - convert classic .NET class libraries into Portable Class Libraries."""

__version__ = "0.1.0"
