# Laser line errors

class LaserLineException(Exception):
    """Generic type for all errors raised at the boundaries of the laser line extraction"""

class ChannelException(LaserLineException, ValueError):
    """Is thrown if an image or byte buffer cannot be turned into a single intensity channel"""

class ConfigException(LaserLineException):
    """Is thrown if a .conf file is missing or holds a value of the wrong type"""
