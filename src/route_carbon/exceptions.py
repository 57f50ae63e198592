"""
Custom exceptions for the route carbon engine
"""


class RouteCarbonError(Exception):
    """Base exception for the route carbon engine"""
    pass


class UnknownTransportModeError(RouteCarbonError, ValueError):
    """Raised when a transport mode is not part of the TransportMode enumeration"""
    pass


class UnknownVariantError(RouteCarbonError, ValueError):
    """Raised when an emission factor variant does not exist for a mode"""
    pass


class RouteValidationError(RouteCarbonError, ValueError):
    """Raised when route or segment input fails validation"""
    pass


class InvalidSegmentError(RouteValidationError):
    """Raised when a segment carries negative, non-numeric or non-finite values"""
    pass


class EmptyRouteError(RouteValidationError):
    """Raised when a route has no transport segments"""
    pass


class ConfigurationError(RouteCarbonError):
    """Raised when a parameter override cannot be used"""
    pass
