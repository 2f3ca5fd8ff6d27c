"""Model container image layers as file trees and measure wasted space."""

__version__ = "0.1.0"