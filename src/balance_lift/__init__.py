"""balance-lift: strength plan workout tracker."""

__version__ = "0.1.0"
