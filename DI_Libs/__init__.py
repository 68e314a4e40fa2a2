"""
DI_Libs - Dynamic Image Library Modules

This package contains core functionality for the Dynamic Image project,
organized into specialized sub-packages:

- ImageLib: Canvas resource model, colors, format handling and disk cache
- TextLib: Text overlay rendering and the text decorator chain
- BannerLib: JSON banner jobs that combine images, layers and text
"""

__version__ = "0.1.0"
