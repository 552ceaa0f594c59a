"""
Streamwin - Stream Window Allocator

Decides which contiguous calendar window a new market-data stream may occupy
for a symbol without overlapping the streams already stored for it, subject
to a market-type dependent maximum window length.
"""

__version__ = "0.1.0"
__author__ = "Streamwin Team"
