"""phpsense - symbol index and code completion for PHP source trees."""

__version__ = "0.1.0"
